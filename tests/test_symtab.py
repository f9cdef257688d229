import itertools
import string

import pytest

from cminusc.symtab import (
    GLOBAL_SCOPE_NAME,
    TABLE_SIZE,
    SymbolTable,
    exp_type_label,
    hash_key,
    parameter_count,
    var_kind_label,
    var_mem_label,
    variable_count,
)
from cminusc.tree import (
    ExpType,
    StmtKind,
    SysCallKind,
    VarAccess,
    VarKind,
    VarMem,
    link_siblings,
    stmt_node,
    sys_node,
    var_node,
)


def _var(name, lineno=1, kind=VarKind.ID, access=VarAccess.DECL):
    return var_node(kind, lineno, name, access)


def _function(name, params=None, body=None, lineno=1):
    return var_node(VarKind.FUNCTION, lineno, name, VarAccess.DECL, params, body)


def _table_with_global():
    table = SymbolTable()
    table.push(table.create_scope(GLOBAL_SCOPE_NAME))
    return table


def _colliding_names():
    seen = {}
    for letters in itertools.product(string.ascii_lowercase, repeat=2):
        name = "".join(letters)
        h = hash_key(name)
        if h in seen:
            return seen[h], name
        seen[h] = name
    raise AssertionError("no collision found")


def test_hash_key_range_and_empty():
    assert hash_key("") == 0
    for name in ("main", "x", "a_very_long_identifier_name", "vetor"):
        assert 0 <= hash_key(name) < TABLE_SIZE
        assert hash_key(name) == hash_key(name)


def test_create_scope_parents():
    table = SymbolTable()
    glob = table.create_scope(GLOBAL_SCOPE_NAME)
    func = table.create_scope("main")
    assert table.global_scope is glob
    assert glob.parent is None
    assert func.parent is glob
    assert table.scopes == [glob, func]


def test_stack_push_pop_top():
    table = _table_with_global()
    func = table.create_scope("f")
    table.push(func)
    assert table.top() is func
    assert table.pop() is func
    assert table.top() is table.global_scope
    table.pop()
    with pytest.raises(IndexError):
        table.top()
    with pytest.raises(IndexError):
        table.pop()


def test_insert_and_bucket():
    table = _table_with_global()
    node = _var("x", 3)
    table.insert("x", 3, 7, node, 1)
    bucket = table.bucket("x")
    assert bucket.name == "x"
    assert bucket.memloc == 7
    assert bucket.lines == [3]
    assert bucket.node is node
    assert node.scope is table.global_scope
    assert table.global_scope.memory_size == 1


def test_duplicate_insert_is_ignored():
    table = _table_with_global()
    table.insert("x", 1, 0, _var("x"), 1)
    table.insert("x", 2, 5, _var("x", 2), 4)
    assert table.lookup("x") == 0
    assert table.global_scope.memory_size == 1


def test_nested_lookup_reaches_global():
    table = _table_with_global()
    table.insert("g", 1, 2, _var("g"), 1)
    table.push(table.create_scope("main"))
    table.insert("l", 2, 0, _var("l", 2), 1)
    assert table.lookup("g") == 2
    assert table.scope_of("g") is table.global_scope
    assert table.scope_of("l") is table.top()
    assert table.lookup_top("g") == -1
    assert table.lookup_top("l") == 0
    assert table.lookup("missing") == -1
    assert table.bucket("missing") is None
    assert table.scope_of("missing") is None


def test_insert_function_goes_to_global():
    table = _table_with_global()
    table.push(table.create_scope("main"))
    fn = _function("main")
    table.insert_function("main", 4, fn)
    assert table.lookup_function("main")
    assert not table.lookup_function("other")
    bucket = table.bucket_function("main")
    assert bucket.memloc == -1
    assert bucket.size == 0
    assert fn.scope is table.global_scope
    assert table.lookup_top("main") == -1
    assert table.in_global_scope(fn)


def test_colliding_names_are_chained():
    first, second = _colliding_names()
    table = _table_with_global()
    table.insert(first, 1, 0, _var(first), 1)
    table.insert(second, 2, 1, _var(second, 2), 1)
    assert table.lookup(first) == 0
    assert table.lookup(second) == 1


def test_insert_function_prepends_in_listing():
    first, second = _colliding_names()
    table = _table_with_global()
    table.insert(first, 1, 0, _var(first), 1)
    table.insert_function(second, 2, _function(second, lineno=2))
    lines = table.format().splitlines()
    names = [line.split()[0] for line in lines if line.split() and line.split()[0] in (first, second)]
    assert names == [second, first]


def test_add_line():
    table = _table_with_global()
    table.insert("x", 1, 0, _var("x"), 1)
    table.push(table.create_scope("main"))
    use = _var("x", 5, access=VarAccess.ACCESS)
    table.add_line(use)
    table.add_line(_var("x", 5, access=VarAccess.ACCESS))
    assert table.bucket("x").lines == [1, 5]
    assert use.scope is table.global_scope
    with pytest.raises(KeyError):
        table.add_line(_var("nope", 6, access=VarAccess.ACCESS))


def test_variable_and_memory_location():
    table = _table_with_global()
    func = table.create_scope("f")
    table.push(func)
    table.insert("a", 1, 3, _var("a"), 1)
    assert table.variable("a", func).memloc == 3
    assert table.variable("a", table.global_scope) is None
    assert table.memory_location("a", func) == 3
    assert table.memory_location("a", table.global_scope) == -1


def test_scope_memory_size():
    table = _table_with_global()
    func = table.create_scope("f")
    table.push(func)
    table.insert("v", 1, 0, _var("v", kind=VarKind.VECTOR), 10)
    table.insert("a", 2, 10, _var("a", 2), 1)
    assert table.scope_memory_size("f") == func.memory_size
    assert table.scope_memory_size("f") == 11
    assert table.scope_memory_size("unknown") == 0


def test_global_memory_size_counts_only_variables():
    table = _table_with_global()
    table.insert("x", 1, 0, _var("x"), 1)
    table.insert("v", 2, 1, _var("v", 2, kind=VarKind.VECTOR), 5)
    table.insert_function("main", 3, _function("main", lineno=3))
    assert table.global_memory_size() == 6


def test_find_global():
    table = _table_with_global()
    table.insert("x", 1, 0, _var("x"), 1)
    table.push(table.create_scope("main"))
    table.insert("y", 2, 0, _var("y", 2), 1)
    assert table.find_global("x").name == "x"
    assert table.find_global("y") is None


def test_syscalls():
    table = SymbolTable()
    node = sys_node(SysCallKind.OUTPUT, 1)
    table.register_syscall("output", node)
    assert table.lookup_syscall("output") is node
    assert table.lookup_syscall("input") is None
    table.clear_syscalls()
    assert table.lookup_syscall("output") is None


def test_parameter_and_variable_counts():
    params = link_siblings(
        stmt_node(StmtKind.INTEGER, 1, _var("a")),
        stmt_node(StmtKind.INTEGER, 1, _var("b")),
    )
    decls = link_siblings(
        stmt_node(StmtKind.INTEGER, 2, _var("c", 2)),
        stmt_node(StmtKind.INTEGER, 2, _var("d", 2)),
        stmt_node(StmtKind.INTEGER, 2, _var("e", 2)),
    )
    body = stmt_node(StmtKind.COMPOUND, 2, decls, None)
    fn = _function("f", params, body)
    assert parameter_count(fn) == 2
    assert variable_count(fn) == 3
    empty = _function("g", None, stmt_node(StmtKind.COMPOUND, 1, None, None))
    assert parameter_count(empty) == 0
    assert variable_count(empty) == 0


def test_labels():
    assert var_kind_label(VarKind.ID) == "Variavel"
    assert var_kind_label(VarKind.CALL) == "Chamada de funcao"
    assert var_mem_label(VarMem.PARAM) == "Parametro"
    assert var_mem_label(VarMem.FUNCTION_MEM) == "-"
    assert exp_type_label(ExpType.VOID) == "void"
    assert exp_type_label(ExpType.INTEGER) == "inteiro"


def test_format_listing():
    table = _table_with_global()
    glob_var = _var("x")
    glob_var.type = ExpType.INTEGER
    table.insert("x", 1, 0, glob_var, 1)
    table.insert_function("main", 2, _function("main", lineno=2))
    table.push(table.create_scope("main"))
    table.insert("y", 3, 0, _var("y", 3), 1)
    text = table.format()
    assert text.startswith("<Escopo Global>\n")
    assert "Nome da função: main\n" in text
    assert glob_var.mem is VarMem.GLOBAL
    rows = {line.split()[0]: line for line in text.splitlines() if line[:1] in "xmy" and line.strip()}
    assert rows["x"].startswith("x".ljust(18) + "inteiro".ljust(10) + "Variavel".ljust(12))
    assert "Global" in rows["x"]
    assert "void" in rows["main"]
    assert rows["main"].rstrip().endswith("-       2")
    assert "Local" in rows["y"]


def test_too_many_scopes():
    table = SymbolTable()
    table.create_scope(GLOBAL_SCOPE_NAME)
    for index in range(39):
        table.create_scope(f"f{index}")
    with pytest.raises(OverflowError):
        table.create_scope("extra")