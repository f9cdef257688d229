# cminusc

`cminusc` covers the stages of a C-minus compiler for the iZero machine that
come after parsing. You give it a syntax tree. It builds the symbol table,
checks types and produces three-address intermediate code.

## Modules

* **`cminusc.tree`** defines the syntax tree.
  * Node kinds: `NodeKind`, `StmtKind`, `ExpKind`, `VarKind`, `SysCallKind`.
  * Variable attributes: `VarAccess` and `VarMem`.
  * Other enumerations: `ExpType` and `Operator`.
  * `TreeNode` is the node class. `TreeNode.siblings()` walks a sibling chain and `TreeNode.child(index)` returns one child.
  * `stmt_node`, `exp_node`, `var_node`, `const_node`, `sys_node` and `link_siblings` build trees by hand.
  * `CodeInfo` holds the `CodeType` (program, BIOS or kernel), the source file name and an offset.
* **`cminusc.symtab`** provides `SymbolTable`.
  * Each scope (`Scope`) has its own chained hash table of 211 slots. Function scopes sit under the global scope `ESCOPO_GLOBAL`.
  * Each entry (`Bucket`) records:
    * the lines the name appears on
    * its tree node
    * its memory location
    * its size
  * The table also records declared system calls.
  * `SymbolTable.format()` renders the table listing. Rendering marks global non-function entries as `Global`.
  * Helpers: `hash_key`, `parameter_count` and `variable_count`.
* **`cminusc.analyze`** provides `Analyzer`.
  * `build_symbol_table(tree)` fills a `SymbolTable` and returns it.
  * `type_check(tree)` assigns expression types.
  * Diagnostics are written to the listing stream, or to standard output when none is given. The listing stream is optional.
  * Error messages are collected in `errors`, and `error` is set to `True`. The analyzer reports:
    * undeclared variables and functions
    * redeclarations in the same scope
    * functions used as variables
    * `void` variables
    * assignments whose operands are not `int`
  * A missing `main` is written to the listing. It does not set `error`.
  * When `trace` is true, the symbol table listing follows.
  * `traverse(node, pre, post)` is the generic tree walk.
* **`cminusc.quads`** defines the intermediate code.
  * `Operand` is created with `Operand.constant` or `Operand.named`.
  * `Quadruple` is one instruction.
  * `QuadList` is the ordered code. Quadruples are numbered in creation order.
  * `QuadList.format_lines()` returns the listing lines.
* **`cminusc.cgen`** provides `CodeGenerator.generate(tree, code_info)`. It produces code for:
  * assignments, including compound assignments and vector stores
  * arithmetic, relational, logical and unary expressions
  * `if`/`else` and `while`, using labels and `jump_if_false`
  * functions, parameters, calls and returns

  Program code ends with `syscall`. BIOS and kernel code end with `halt`. `generate_code(tree, code_info, emitter)` also writes the listing through an `Emitter`.
* **`cminusc.code`** holds the lookup tables.
  * The enumerations `Instruction`, `Opcode`, `Function` and `RegisterName`.
  * Their names: `instruction_name`, `opcode_name`, `function_name`, `register_name`.
  * Their binary encodings: `opcode_binary`, `function_binary`, `register_binary`.
  * `Emitter` writes lines to a code stream and an optional binary stream.
* **`cminusc.cli`** provides `parse_arguments(argv)`. It interprets an argument vector, program name first, and returns a `CodeInfo`.
  * It appends `.c` to a file name that has no extension.
  * `-b`/`--bios` and `-k`/`--kernel` select the code type.
  * Any other third argument is read as an integer offset.
  * `-h`/`--help` raises `HelpRequested`, carrying `options_text()`.
  * A wrong argument count raises `ArgumentError`, carrying `usage_text(program)`.
  * A missing source file raises `FileNotFoundError`.

The package has no runtime dependencies.

## Example

```python
import io

from cminusc.analyze import Analyzer
from cminusc.cgen import generate_code
from cminusc.code import Emitter


def compile_tree(tree, code_info):
    listing = io.StringIO()
    analyzer = Analyzer(listing, False)
    analyzer.build_symbol_table(tree)
    analyzer.type_check(tree)

    code_out = io.StringIO()
    emitter = Emitter(code_out, None, False)
    quads = generate_code(tree, code_info, emitter)
    return listing.getvalue(), code_out.getvalue(), quads
```

The intermediate code is listed one quadruple per line, with `_` for a missing
operand:

```
1: (function, main, _, _)
2: (assign, x, 5, _)
...
```

## What it does not do

* There is no scanner or parser. Trees must be built with the helpers in `cminusc.tree`.
* No object code or binary machine code is generated. The opcode, function and register tables and `Emitter.emit_binary` are there, but nothing produces target instructions from the quadruples.
* There is no command-line program. `parse_arguments` only interprets arguments.

## Tests

The tests use pytest, which is declared in the `test` extra:

```
pip install -e .[test]
pytest
```