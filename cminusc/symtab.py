"""Scoped symbol table kept as chained hash tables, one per scope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from cminusc.tree import ExpType, SysCallKind, TreeNode, VarKind, VarMem

TABLE_SIZE = 211
SHIFT = 4
MAX_SCOPES = 40
GLOBAL_SCOPE_NAME = "ESCOPO_GLOBAL"

_VAR_KIND_LABELS = {
    VarKind.ID: "Variavel",
    VarKind.VECTOR: "Vetor",
    VarKind.CONST: "Constante",
    VarKind.FUNCTION: "Funcao",
    VarKind.CALL: "Chamada de funcao",
}

_VAR_MEM_LABELS = {
    VarMem.LOCAL: "Local",
    VarMem.PARAM: "Parametro",
    VarMem.GLOBAL: "Global",
    VarMem.FUNCTION_MEM: "-",
}

_EXP_TYPE_LABELS = {
    ExpType.VOID: "void",
    ExpType.INTEGER: "inteiro",
}

_GLOBAL_HEADER = (
    "Nome da variavel  Tipo ID   Tipo dados  Nº parametros  Tipo parametros  "
    "Origem Variavel  Tamanho  MemLoC  Numero das linhas\n"
    "----------------  --------  ----------  -------------  ---------------  "
    "---------------  -------  ------  -----------------\n"
)

_LOCAL_HEADER = (
    "Nome da variavel  Tipo ID   Tipo dados  Origem Variavel  Tamanho  MemLoc  "
    "Numero das linhas\n"
    "----------------  --------  ----------  ---------------  -------  ------  "
    "-----------------\n"
)


def hash_key(name: str) -> int:
    """Hash a name into a slot of a scope's table."""
    value = 0
    for char in name:
        value = ((value << SHIFT) + ord(char)) % TABLE_SIZE
    return value


def _chain_length(node: Optional[TreeNode]) -> int:
    return 0 if node is None else sum(1 for _ in node.siblings())


def parameter_count(function_node: TreeNode) -> int:
    """Number of parameters declared by a function node."""
    return _chain_length(function_node.children[0])


def variable_count(function_node: TreeNode) -> int:
    """Number of declarations at the top of a function's body."""
    body = function_node.children[1]
    if body is None:
        raise ValueError("function node has no body")
    return _chain_length(body.children[0])


def var_kind_label(kind: VarKind) -> str:
    """Listing label of a variable kind."""
    return _VAR_KIND_LABELS[kind]


def var_mem_label(mem: VarMem) -> str:
    """Listing label of a variable's storage origin."""
    return _VAR_MEM_LABELS[mem]


def exp_type_label(exp_type: ExpType) -> str:
    """Listing label of an expression type."""
    return _EXP_TYPE_LABELS[exp_type]


@dataclass(eq=False)
class Bucket:
    """One symbol: its name, the lines it appears on, its node and memory."""

    name: str
    lines: list[int]
    node: TreeNode
    memloc: int
    size: int


def _empty_table() -> list[list[Bucket]]:
    return [[] for _ in range(TABLE_SIZE)]


@dataclass(eq=False)
class Scope:
    """A function (or the global) scope with its own hash table."""

    func_name: str
    parent: Optional["Scope"] = None
    memory_size: int = 0
    table: list[list[Bucket]] = field(default_factory=_empty_table)

    def _find(self, name: str) -> Optional[Bucket]:
        return next((b for b in self.table[hash_key(name)] if b.name == name), None)

    def _buckets(self) -> Iterator[Bucket]:
        for slot in self.table:
            yield from slot


@dataclass(eq=False)
class _SysCall:
    name: str
    node: TreeNode


class SymbolTable:
    """All scopes created during analysis, the scope stack and system calls."""

    def __init__(self) -> None:
        self.scopes: list[Scope] = []
        self.stack: list[Scope] = []
        self.global_scope: Optional[Scope] = None
        self.syscalls: list[_SysCall] = []

    def _global(self) -> Scope:
        if self.global_scope is None:
            raise LookupError("the global scope has not been created")
        return self.global_scope

    def create_scope(self, func_name: str) -> Scope:
        """Create and record a scope; the global one is named ESCOPO_GLOBAL."""
        if len(self.scopes) >= MAX_SCOPES:
            raise OverflowError(f"more than {MAX_SCOPES} scopes")
        if func_name == GLOBAL_SCOPE_NAME:
            scope = Scope(func_name, None)
            self.global_scope = scope
        else:
            scope = Scope(func_name, self.global_scope)
        self.scopes.append(scope)
        return scope

    def push(self, scope: Scope) -> None:
        """Make ``scope`` the current scope."""
        if len(self.stack) >= MAX_SCOPES:
            raise OverflowError(f"more than {MAX_SCOPES} nested scopes")
        self.stack.append(scope)

    def pop(self) -> Scope:
        """Leave the current scope and return it."""
        if not self.stack:
            raise IndexError("scope stack is empty")
        return self.stack.pop()

    def top(self) -> Scope:
        """The current scope."""
        if not self.stack:
            raise IndexError("scope stack is empty")
        return self.stack[-1]

    def insert(self, name: str, lineno: int, loc: int, node: TreeNode, size: int) -> None:
        """Declare ``name`` in the current scope unless it is already there."""
        top = self.top()
        if top._find(name) is not None:
            return
        node.scope = top
        top.table[hash_key(name)].append(Bucket(name, [lineno], node, loc, size))
        top.memory_size += size

    def insert_function(self, name: str, lineno: int, node: TreeNode) -> None:
        """Declare a function in the global scope unless it is already there."""
        scope = self._global()
        if scope._find(name) is not None:
            return
        node.scope = scope
        scope.table[hash_key(name)].insert(0, Bucket(name, [lineno], node, -1, 0))

    def _search(self, name: str) -> tuple[Optional[Scope], Optional[Bucket]]:
        scope: Optional[Scope] = self.top()
        while scope is not None:
            bucket = scope._find(name)
            if bucket is not None:
                return scope, bucket
            scope = scope.parent
        return None, None

    def bucket(self, name: str) -> Optional[Bucket]:
        """Find ``name`` in the current scope or an enclosing one."""
        return self._search(name)[1]

    def bucket_function(self, name: str) -> Optional[Bucket]:
        """Find ``name`` in the global scope."""
        return self._global()._find(name)

    def scope_of(self, name: str) -> Optional[Scope]:
        """The nearest scope declaring ``name``."""
        return self._search(name)[0]

    def lookup(self, name: str) -> int:
        """Memory location of ``name`` as seen from the current scope, or -1."""
        bucket = self.bucket(name)
        return -1 if bucket is None else bucket.memloc

    def lookup_function(self, name: str) -> bool:
        """True if ``name`` is declared in the global scope."""
        return self.bucket_function(name) is not None

    def lookup_top(self, name: str) -> int:
        """Memory location of ``name`` in the current scope only, or -1."""
        bucket = self.top()._find(name)
        return -1 if bucket is None else bucket.memloc

    def in_global_scope(self, node: TreeNode) -> bool:
        """True if the node's name is declared in the global scope."""
        return self._global()._find(node.name or "") is not None

    def add_line(self, node: TreeNode) -> None:
        """Record a use of the node's name and attach its scope to the node."""
        name = node.name or ""
        scope, bucket = self._search(name)
        if bucket is None:
            raise KeyError(name)
        node.scope = scope
        if bucket.lines[-1] != node.lineno:
            bucket.lines.append(node.lineno)

    def variable(self, name: str, scope: Scope) -> Optional[Bucket]:
        """Find ``name`` in ``scope`` only."""
        return scope._find(name)

    def memory_location(self, name: str, scope: Scope) -> int:
        """Memory location of ``name`` in ``scope`` only, or -1."""
        bucket = scope._find(name)
        return -1 if bucket is None else bucket.memloc

    def scope_memory_size(self, scope_name: str) -> int:
        """Memory block size of the first scope with this name, or 0."""
        return next(
            (s.memory_size for s in self.scopes if s.func_name == scope_name), 0
        )

    def global_memory_size(self) -> int:
        """Total size of the variables and vectors in the first scope."""
        if not self.scopes:
            return 0
        return sum(
            b.size
            for b in self.scopes[0]._buckets()
            if b.node.var_kind in (VarKind.ID, VarKind.VECTOR)
        )

    def find_global(self, name: str) -> Optional[Bucket]:
        """Find ``name`` among the symbols of the first scope."""
        if not self.scopes:
            return None
        return next((b for b in self.scopes[0]._buckets() if b.name == name), None)

    def register_syscall(self, name: str, node: TreeNode) -> None:
        """Record a system call declaration."""
        self.syscalls.append(_SysCall(name, node))

    def lookup_syscall(self, name: str) -> Optional[TreeNode]:
        """The declaring node of the system call called ``name``, if any."""
        for syscall in self.syscalls:
            kind: Optional[SysCallKind] = syscall.node.sys
            if kind is not None and kind.value == name:
                return syscall.node
        return None

    def clear_syscalls(self) -> None:
        """Forget every recorded system call."""
        self.syscalls.clear()

    def _format_rows(self, scope: Scope, is_global: bool) -> str:
        rows = []
        for bucket in scope._buckets():
            node = bucket.node
            row = f"{bucket.name:<18}"
            row += f"{exp_type_label(node.type):<10}"
            row += f"{var_kind_label(node.var_kind):<12}"
            if is_global:
                if node.var_kind is VarKind.FUNCTION:
                    row += f"{parameter_count(node):<15}"
                    row += f"{'void' if node.children[0] is None else 'int':<17}"
                else:
                    node.mem = VarMem.GLOBAL
                    row += " " * 32
            row += f"{var_mem_label(node.mem):<17}"
            row += f"{bucket.size:<9}"
            row += f"{'-':<8}" if bucket.memloc == -1 else f"{bucket.memloc:<8}"
            row += "".join(" " if line == -1 else f"{line:<4}" for line in bucket.lines)
            rows.append(row + "\n")
        return "".join(rows)

    def format(self) -> str:
        """The symbol table listing; global non-functions are marked Global."""
        parts = []
        for index, scope in enumerate(self.scopes):
            if index == 0:
                parts.append("<Escopo Global>\n")
                parts.append(_GLOBAL_HEADER)
                parts.append(self._format_rows(scope, True))
                parts.append("\n")
            else:
                parts.append(f"Nome da função: {scope.func_name}\n")
                parts.append(_LOCAL_HEADER)
                parts.append(self._format_rows(scope, False))
            parts.append("\n")
        return "".join(parts)