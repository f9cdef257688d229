"""Semantic analysis: symbol table construction and type checking."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from cminusc.symtab import GLOBAL_SCOPE_NAME, SymbolTable
from cminusc.tree import (
    ExpKind,
    ExpType,
    NodeKind,
    StmtKind,
    TreeNode,
    VarAccess,
    VarKind,
)

Visitor = Callable[[TreeNode], None]


def traverse(node: Optional[TreeNode], pre: Visitor, post: Visitor) -> None:
    """Visit a tree: ``pre`` before a node's children, ``post`` after them.

    Siblings are visited in order once a node and its subtree are done.
    """
    if node is None:
        return
    for current in node.siblings():
        pre(current)
        for child in current.children:
            traverse(child, pre, post)
        post(current)


class Analyzer:
    """Builds the symbol table for a syntax tree and checks its types.

    Errors are written to ``listing`` as they are found; ``error`` becomes
    True and each message is kept in ``errors``.
    """

    def __init__(self, listing: Optional[TextIO] = None, trace: bool = False) -> None:
        self.listing = listing
        self.trace = trace
        self.symtab = SymbolTable()
        self.location = 0
        self.main_declared = False
        self.func_name: Optional[str] = None
        self.error = False
        self.errors: list[str] = []
        self._entered: set[TreeNode] = set()

    @property
    def _out(self) -> TextIO:
        return self.listing if self.listing is not None else sys.stdout

    def _report(self, message: str) -> None:
        self._out.write(f"{message}\n")
        self.errors.append(message)
        self.error = True

    def _decl_error(self, node: TreeNode, message: str) -> None:
        self._report(f"Erro de declaração na linha {node.lineno}: {message}")

    def _var_error(self, node: TreeNode, message: str) -> None:
        self._report(f"Erro de variável na linha {node.lineno}: {message}")

    def _type_error(self, node: TreeNode, message: str) -> None:
        self._report(f"Erro de tipo na linha {node.lineno}: {message}")

    # -- symbol table construction -------------------------------------

    def _access(self, node: TreeNode) -> None:
        bucket = self.symtab.bucket(node.name or "")
        if bucket is None:
            self._var_error(node, "Variável não declarada no escopo")
        elif bucket.node.var_kind is VarKind.FUNCTION:
            self._var_error(node, "Não é possível referenciar uma função como variável")
        else:
            self.symtab.add_line(node)

    def _can_declare(self, node: TreeNode) -> bool:
        bucket = self.symtab.bucket(node.name or "")
        if bucket is None:
            return True
        if bucket.node.var_kind is VarKind.FUNCTION:
            self._decl_error(node, "Nome da variável já é usado para declarar uma função")
            return False
        scope = bucket.node.scope
        if scope is not None and scope.func_name == self.symtab.top().func_name:
            self._decl_error(node, "Variável já declarada neste escopo")
            return False
        return True

    def _declare(self, node: TreeNode, size: int) -> None:
        if not self._can_declare(node):
            return
        self.symtab.insert(node.name or "", node.lineno, self.location, node, size)
        self.location += size

    def _insert_node(self, node: TreeNode) -> None:
        if node.node is NodeKind.SYS:
            if node.sys is not None:
                self.symtab.register_syscall(node.sys.value, node)
            return
        if node.node is not NodeKind.VAR:
            return
        kind = node.var_kind
        if kind in (VarKind.ID, VarKind.VECTOR):
            if node.access is VarAccess.ACCESS:
                self._access(node)
            elif kind is VarKind.ID:
                self._declare(node, 1)
            else:
                size_node = node.children[0]
                self._declare(node, size_node.value if size_node is not None else 1)
        elif kind is VarKind.FUNCTION:
            name = node.name or ""
            self.func_name = name
            if name == "main":
                self.main_declared = True
            if self.symtab.lookup_function(name):
                self._decl_error(node, "Função main já declarada")
                return
            self.location = 0
            self.symtab.push(self.symtab.create_scope(name))
            self._entered.add(node)
            self.symtab.insert_function(name, node.lineno, node)
        elif kind is VarKind.CALL:
            name = node.name or ""
            self.func_name = name
            if self.symtab.lookup_syscall(name) is not None:
                return
            bucket = self.symtab.bucket_function(name)
            if bucket is None:
                self._decl_error(node, "Função não declarada")
            else:
                node.type = bucket.node.type

    def _after_insert_node(self, node: TreeNode) -> None:
        if node in self._entered:
            self._entered.discard(node)
            self.symtab.pop()

    def build_symbol_table(self, tree: Optional[TreeNode]) -> SymbolTable:
        """Fill the symbol table from the tree and return it."""
        self.symtab.push(self.symtab.create_scope(GLOBAL_SCOPE_NAME))
        traverse(tree, self._insert_node, self._after_insert_node)
        self.symtab.pop()
        self.symtab.clear_syscalls()
        if not self.main_declared:
            self._out.write("Erro de declaração: Função main não declarada\n")
            return self.symtab
        if self.trace:
            self._out.write("\nTabela de símbolos:\n")
            self._out.write(self.symtab.format())
        return self.symtab

    # -- type checking -------------------------------------------------

    def _before_check(self, node: TreeNode) -> None:
        if node.node is NodeKind.EXP and node.var_kind is VarKind.FUNCTION:
            self.func_name = node.name

    def _check_stmt(self, node: TreeNode) -> None:
        child = node.children[0]
        if node.stmt is StmtKind.INTEGER and child is not None:
            child.type = ExpType.INTEGER
        elif node.stmt is StmtKind.VOID and child is not None:
            if child.var_kind is VarKind.ID:
                self._type_error(node, "Variável não pode ser do tipo void")
            else:
                child.type = ExpType.VOID

    def _check_exp(self, node: TreeNode) -> None:
        if node.exp is ExpKind.ASSIGN:
            left, right = node.children[0], node.children[1]
            if (
                left is None
                or right is None
                or left.type is not ExpType.INTEGER
                or right.type is not ExpType.INTEGER
            ):
                self._type_error(
                    node,
                    "Atribuição inválida, era esperado um valor int e foi recebido void",
                )
            else:
                node.type = ExpType.INTEGER
        elif node.exp in (ExpKind.RELATIONAL, ExpKind.LOGIC):
            node.type = ExpType.VOID
        elif node.exp in (ExpKind.ARITHMETIC, ExpKind.UNARY):
            node.type = ExpType.INTEGER

    def _check_node(self, node: TreeNode) -> None:
        if node.node is NodeKind.STMT:
            self._check_stmt(node)
        elif node.node is NodeKind.EXP:
            self._check_exp(node)
        elif node.node is NodeKind.VAR and node.var_kind in (
            VarKind.ID,
            VarKind.VECTOR,
            VarKind.CONST,
        ):
            node.type = ExpType.INTEGER

    def type_check(self, tree: Optional[TreeNode]) -> None:
        """Assign expression types and report type errors."""
        traverse(tree, self._before_check, self._check_node)