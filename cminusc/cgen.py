"""Intermediate code generation: turns a checked syntax tree into quadruples."""

from __future__ import annotations

from typing import Optional

from cminusc.code import Emitter, Instruction
from cminusc.quads import Operand, OperandKind, QuadList, Quadruple
from cminusc.symtab import parameter_count
from cminusc.tree import (
    CodeInfo,
    CodeType,
    ExpKind,
    NodeKind,
    Operator,
    StmtKind,
    TreeNode,
    VarAccess,
    VarKind,
)

_COMPOUND_ASSIGN = {
    Operator.ADD_ASSIGN: Instruction.ADD,
    Operator.SUB_ASSIGN: Instruction.SUB,
    Operator.MUL_ASSIGN: Instruction.MULT,
    Operator.DIV_ASSIGN: Instruction.DIV,
    Operator.MOD_ASSIGN: Instruction.MOD,
    Operator.AND_ASSIGN: Instruction.BITW_AND,
    Operator.OR_ASSIGN: Instruction.BITW_OR,
    Operator.XOR_ASSIGN: Instruction.BITW_XOR,
    Operator.SHL_ASSIGN: Instruction.SHFT_LF,
    Operator.SHR_ASSIGN: Instruction.SHFT_RT,
}

_RELATIONAL = {
    Operator.EQ: Instruction.EQ,
    Operator.NE: Instruction.NE,
    Operator.LT: Instruction.LT,
    Operator.LE: Instruction.LET,
    Operator.GT: Instruction.GT,
    Operator.GE: Instruction.GET,
}

_ARITHMETIC = {
    Operator.PLUS: Instruction.ADD,
    Operator.MINUS: Instruction.SUB,
    Operator.TIMES: Instruction.MULT,
    Operator.DIVIDE: Instruction.DIV,
    Operator.MODULO: Instruction.MOD,
    Operator.SHL: Instruction.SHFT_LF,
    Operator.SHR: Instruction.SHFT_RT,
}

_LOGIC = {
    Operator.LOGICAL_AND: Instruction.LOGIC_AND,
    Operator.LOGICAL_OR: Instruction.LOGIC_OR,
    Operator.AND: Instruction.BITW_AND,
    Operator.OR: Instruction.BITW_OR,
    Operator.XOR: Instruction.BITW_XOR,
}

_UNARY = {
    Operator.AND: Instruction.BITW_AND,
    Operator.NOT: Instruction.BITW_NOT,
    Operator.MINUS: Instruction.SUB,
}

HEADER = "********** Código intermediário **********\n"


class CodeGenerator:
    """Walks a syntax tree and builds its three-address code."""

    def __init__(self) -> None:
        self.quads = QuadList()
        self._temporaries = 0
        self._labels = 0
        self._current: Optional[Operand] = None
        self._instruction = Instruction.ADD
        self._last_vector: Optional[Quadruple] = None
        self._pending: list[Quadruple] = []
        self._params: list[int] = []

    # -- helpers ---------------------------------------------------------

    def _temporary(self) -> Operand:
        self._temporaries += 1
        return Operand.named(f"t{self._temporaries}")

    def _label(self, scope: object) -> Operand:
        self._labels += 1
        return Operand.named(f"L{self._labels}", scope)

    def _emit(
        self,
        instruction: Instruction,
        op1: Optional[Operand] = None,
        op2: Optional[Operand] = None,
        op3: Optional[Operand] = None,
    ) -> Quadruple:
        return self.quads.append(self.quads.create(instruction, op1, op2, op3))

    def _resolve_pending(self, label: Operand) -> None:
        quad = self._pending.pop()
        if quad.instruction is Instruction.JPF:
            quad.op2 = label
        else:
            quad.op1 = label

    def _pick(self, table: dict, op: Optional[Operator]) -> Instruction:
        self._instruction = table.get(op, self._instruction)
        return self._instruction

    # -- traversal -------------------------------------------------------

    def _gen(self, tree: Optional[TreeNode]) -> None:
        node = tree
        while node is not None:
            if node.node is NodeKind.STMT:
                self._gen_stmt(node)
            elif node.node is NodeKind.EXP:
                self._gen_exp(node)
            elif node.node is NodeKind.VAR:
                self._gen_var(node)
            # Arguments of a call in progress are walked one at a time.
            if self._params and self._params[-1] != 0:
                break
            node = node.sibling

    def _gen_stmt(self, tree: TreeNode) -> None:
        first, second, third = tree.children
        kind = tree.stmt
        if kind in (StmtKind.INTEGER, StmtKind.VOID):
            self._gen(first)
        elif kind is StmtKind.IF:
            self._gen(first)
            self._pending.append(self._emit(Instruction.JPF, self._current))
            self._gen(second)
            then_end = self._label(tree.scope)
            self._resolve_pending(then_end)
            if third is not None:
                self._pending.append(self._emit(Instruction.GOTO))
            self._emit(Instruction.LBL, then_end)
            self._gen(third)
            if third is not None:
                else_end = self._label(tree.scope)
                self._resolve_pending(else_end)
                self._emit(Instruction.LBL, else_end)
        elif kind is StmtKind.WHILE:
            start = self._label(tree.scope)
            self._emit(Instruction.LBL, start)
            self._gen(first)
            self._pending.append(self._emit(Instruction.JPF, self._current))
            self._gen(second)
            self._emit(Instruction.GOTO, start)
            end = self._label(tree.scope)
            self._emit(Instruction.LBL, end)
            self._resolve_pending(end)
        elif kind is StmtKind.RETURN:
            self._gen(first)
            self._emit(Instruction.RTN, self._current if first is not None else None)
        elif kind is StmtKind.COMPOUND:
            self._gen(first)
            self._gen(second)

    def _binary(self, tree: TreeNode, table: dict) -> None:
        left, right = tree.children[0], tree.children[1]
        self._gen(left)
        op1 = self._current
        self._gen(right)
        op2 = self._current
        instruction = self._pick(table, tree.op)
        self._current = self._temporary()
        self._emit(instruction, op1, op2, self._current)

    def _gen_assign(self, tree: TreeNode) -> None:
        left, right = tree.children[0], tree.children[1]
        self._gen(right)
        op2 = self._current
        self._gen(left)
        op1 = self._current
        op3: Optional[Operand] = None
        if (
            left is not None
            and left.node is NodeKind.VAR
            and left.var_kind is VarKind.VECTOR
        ):
            vector = self._last_vector
            if vector is None:
                raise ValueError("vector assignment without a vector access")
            vector.instruction = Instruction.VEC_ADDR
            if vector.op2 is not None and vector.op2.kind is OperandKind.INT_CONST:
                op3 = Operand.constant(vector.op2.value)
                op1 = vector.op1
        if tree.op is not Operator.ASSIGN:
            instruction = self._pick(_COMPOUND_ASSIGN, tree.op)
            self._current = self._temporary()
            self._emit(instruction, op1, op2, self._current)
            op2 = self._current
        self._instruction = Instruction.ASN
        self._emit(Instruction.ASN, op1, op2, op3)

    def _gen_exp(self, tree: TreeNode) -> None:
        kind = tree.exp
        if kind is ExpKind.ASSIGN:
            self._gen_assign(tree)
        elif kind is ExpKind.RELATIONAL:
            self._binary(tree, _RELATIONAL)
        elif kind is ExpKind.ARITHMETIC:
            self._binary(tree, _ARITHMETIC)
        elif kind is ExpKind.LOGIC:
            self._binary(tree, _LOGIC)
        elif kind is ExpKind.UNARY:
            self._gen(tree.children[0])
            op1 = self._current
            instruction = self._pick(_UNARY, tree.op)
            self._current = self._temporary()
            self._emit(instruction, op1, self._current)

    def _gen_call(self, tree: TreeNode) -> None:
        callee = Operand.named(tree.name or "", tree.scope)
        count = parameter_count(tree)
        self._params.append(count)
        arg_count = Operand.constant(max(count, 0))
        self._instruction = Instruction.PARAM_LIST
        self._emit(Instruction.PARAM_LIST, Operand.constant(count))
        display: Optional[int] = None
        first = tree.children[0]
        if first is not None:
            for arg in first.siblings():
                self._gen(arg)
                self._instruction = Instruction.SET_PARAM
                self._emit(Instruction.SET_PARAM, self._current)
                self._params[-1] -= 1
                if tree.name == "output" and arg.sibling is None:
                    display = arg.value
        self._params.pop()
        self._instruction = Instruction.CALL
        self._current = self._temporary()
        quad = self.quads.create(Instruction.CALL, callee, arg_count, self._current)
        if display is not None and display != -1:
            quad.display = display
        self.quads.append(quad)

    def _gen_var(self, tree: TreeNode) -> None:
        kind = tree.var_kind
        if kind is VarKind.CONST:
            self._current = Operand.constant(tree.value)
        elif kind is VarKind.ID:
            self._current = Operand.named(tree.name or "", tree.scope)
        elif kind is VarKind.VECTOR:
            base = Operand.named(tree.name or "", tree.scope)
            self._current = base
            self._gen(tree.children[0])
            index = self._current
            self._instruction = Instruction.VEC
            result = self._temporary()
            self._current = result
            if tree.access is VarAccess.ACCESS:
                self._last_vector = self.quads.create(Instruction.VEC, base, index, result)
                self.quads.append(self._last_vector)
        elif kind is VarKind.FUNCTION:
            self.ensure_return()
            self._emit(Instruction.FUNC, Operand.named(tree.name or "", tree.scope))
            params = tree.children[0]
            if params is not None:
                for param in params.siblings():
                    var = param.children[0]
                    if var is None:
                        raise ValueError("parameter without a variable")
                    self._emit(
                        Instruction.GET_PARAM, Operand.named(var.name or "", var.scope)
                    )
            self._gen(tree.children[1])
        elif kind is VarKind.CALL:
            self._gen_call(tree)

    # -- public interface ------------------------------------------------

    def ensure_return(self) -> None:
        """Append a return unless the code so far already ends with one."""
        last = self.quads.last()
        if last is not None and last.instruction is not Instruction.RTN:
            self._emit(Instruction.RTN)

    def generate(self, tree: Optional[TreeNode], code_info: CodeInfo) -> QuadList:
        """Generate code for the whole tree, ending with halt or syscall."""
        self._gen(tree)
        if code_info.code_type is CodeType.PROGRAM:
            self._emit(Instruction.SYSCALL)
        else:
            self._emit(Instruction.HALT)
        return self.quads


def generate_code(
    tree: Optional[TreeNode], code_info: CodeInfo, emitter: Emitter
) -> QuadList:
    """Generate the intermediate code and write its listing to ``emitter``."""
    quads = CodeGenerator().generate(tree, code_info)
    emitter.emit_code(HEADER)
    for line in quads.format_lines():
        emitter.emit_code(line)
    return quads