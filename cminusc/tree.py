"""Syntax tree nodes and the enumerations shared by the compiler passes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

MAX_CHILDREN = 3


class NodeKind(enum.Enum):
    STMT = enum.auto()
    EXP = enum.auto()
    VAR = enum.auto()
    SYS = enum.auto()


class StmtKind(enum.Enum):
    INTEGER = enum.auto()
    VOID = enum.auto()
    IF = enum.auto()
    WHILE = enum.auto()
    RETURN = enum.auto()
    COMPOUND = enum.auto()


class ExpKind(enum.Enum):
    ASSIGN = enum.auto()
    RELATIONAL = enum.auto()
    ARITHMETIC = enum.auto()
    LOGIC = enum.auto()
    UNARY = enum.auto()


class VarKind(enum.Enum):
    ID = enum.auto()
    VECTOR = enum.auto()
    CONST = enum.auto()
    FUNCTION = enum.auto()
    CALL = enum.auto()


class SysCallKind(enum.Enum):
    """System calls known to the compiler; the value is the name used in calls."""

    INPUT = "input"
    OUTPUT = "output"
    LDK = "ldk"
    SDK = "sdk"
    LAM = "lam"
    SAM = "sam"
    SIM = "sim"
    MMU_LOWER_IM = "mmulowerim"
    MMU_UPPER_IM = "mmuupperim"
    MMU_SELECT = "mmuselect"
    EXEC = "exec"
    LCD = "lcd"
    LCD_PGMS = "lcd_pgms"
    LCD_CURR = "lcd_curr"
    GIC = "gic"
    CIC = "cic"
    GIP = "gip"
    EXEC_AGAIN = "exec_again"
    SAVE_REGS = "save_regs"
    LOAD_REGS = "load_regs"
    LDM = "ldm"
    SDM = "sdm"
    GSP = "gsp"
    GSPB = "gspb"
    GGPB = "ggpb"
    SSPB = "sspb"
    SGPB = "sgpb"
    RGNSP = "rgnsp"


class VarAccess(enum.Enum):
    DECL = enum.auto()
    ACCESS = enum.auto()


class VarMem(enum.Enum):
    LOCAL = enum.auto()
    PARAM = enum.auto()
    GLOBAL = enum.auto()
    FUNCTION_MEM = enum.auto()


class ExpType(enum.Enum):
    VOID = enum.auto()
    INTEGER = enum.auto()


class CodeType(enum.Enum):
    PROGRAM = enum.auto()
    BIOS = enum.auto()
    KERNEL = enum.auto()


class Operator(enum.Enum):
    ASSIGN = enum.auto()
    ADD_ASSIGN = enum.auto()
    SUB_ASSIGN = enum.auto()
    MUL_ASSIGN = enum.auto()
    DIV_ASSIGN = enum.auto()
    MOD_ASSIGN = enum.auto()
    AND_ASSIGN = enum.auto()
    OR_ASSIGN = enum.auto()
    XOR_ASSIGN = enum.auto()
    SHL_ASSIGN = enum.auto()
    SHR_ASSIGN = enum.auto()
    EQ = enum.auto()
    NE = enum.auto()
    LT = enum.auto()
    LE = enum.auto()
    GT = enum.auto()
    GE = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    TIMES = enum.auto()
    DIVIDE = enum.auto()
    MODULO = enum.auto()
    SHL = enum.auto()
    SHR = enum.auto()
    LOGICAL_AND = enum.auto()
    LOGICAL_OR = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    XOR = enum.auto()
    NOT = enum.auto()


def _empty_children() -> list[Optional["TreeNode"]]:
    return [None] * MAX_CHILDREN


@dataclass(eq=False)
class TreeNode:
    """A syntax tree node with up to three children and a sibling chain."""

    node: NodeKind
    lineno: int = 0
    children: list[Optional["TreeNode"]] = field(default_factory=_empty_children)
    sibling: Optional["TreeNode"] = None
    stmt: Optional[StmtKind] = None
    exp: Optional[ExpKind] = None
    var_kind: Optional[VarKind] = None
    sys: Optional[SysCallKind] = None
    mem: VarMem = VarMem.LOCAL
    access: VarAccess = VarAccess.DECL
    scope: Any = None
    name: Optional[str] = None
    value: int = 0
    op: Optional[Operator] = None
    type: ExpType = ExpType.VOID

    def siblings(self) -> Iterator["TreeNode"]:
        """Yield this node and every node along its sibling chain."""
        node: Optional[TreeNode] = self
        while node is not None:
            yield node
            node = node.sibling

    def child(self, index: int) -> Optional["TreeNode"]:
        """Return the child at ``index`` (0 to 2)."""
        if not 0 <= index < MAX_CHILDREN:
            raise IndexError(f"child index {index} out of range")
        return self.children[index]


def _set_children(node: TreeNode, children: tuple) -> TreeNode:
    if len(children) > MAX_CHILDREN:
        raise ValueError(f"a node has at most {MAX_CHILDREN} children")
    for index, child in enumerate(children):
        node.children[index] = child
    return node


def stmt_node(kind: StmtKind, lineno: int, *args: Optional[TreeNode]) -> TreeNode:
    """Build a statement node with the given children."""
    return _set_children(TreeNode(NodeKind.STMT, lineno, stmt=kind), args)


def exp_node(
    kind: ExpKind, op: Optional[Operator], lineno: int, *args: Optional[TreeNode]
) -> TreeNode:
    """Build an expression node with an operator and children."""
    return _set_children(TreeNode(NodeKind.EXP, lineno, exp=kind, op=op), args)


def var_node(
    kind: VarKind,
    lineno: int,
    name: Optional[str],
    access: VarAccess,
    *args: Optional[TreeNode],
) -> TreeNode:
    """Build a variable, vector, function or call node."""
    node = TreeNode(NodeKind.VAR, lineno, var_kind=kind, name=name, access=access)
    return _set_children(node, args)


def const_node(value: int, lineno: int) -> TreeNode:
    """Build an integer constant node."""
    return TreeNode(
        NodeKind.VAR, lineno, var_kind=VarKind.CONST, value=value, access=VarAccess.ACCESS
    )


def sys_node(kind: SysCallKind, lineno: int) -> TreeNode:
    """Build a node that declares a system call."""
    return TreeNode(NodeKind.SYS, lineno, sys=kind)


def link_siblings(*args: Optional[TreeNode]) -> Optional[TreeNode]:
    """Chain the given nodes as siblings, skipping None; return the first."""
    present = [node for node in args if node is not None]
    for first, second in zip(present, present[1:]):
        tail = first
        while tail.sibling is not None:
            tail = tail.sibling
        tail.sibling = second
    return present[0] if present else None


@dataclass
class CodeInfo:
    """What kind of code to produce, from which file, at which offset."""

    code_type: CodeType = CodeType.PROGRAM
    pgm: str = ""
    offset: int = 0