import io

import pytest

from cminusc.code import (
    Emitter,
    Function,
    Instruction,
    Opcode,
    RegisterName,
    function_binary,
    function_name,
    instruction_name,
    opcode_binary,
    opcode_name,
    register_binary,
    register_name,
)


@pytest.mark.parametrize(
    "instruction, name",
    [
        (Instruction.ADD, "addition"),
        (Instruction.VEC_ADDR, "vector_address"),
        (Instruction.JPF, "jump_if_false"),
        (Instruction.HALT, "halt"),
    ],
)
def test_instruction_names(instruction, name):
    assert instruction_name(instruction) == name


@pytest.mark.parametrize(
    "opcode, name, bits",
    [
        (Opcode.ADDI, "addi", "000001"),
        (Opcode.MMU_LOWER_IM, "mmuLowerIM", "011011"),
        (Opcode.SYSCALL, "syscall", "111001"),
        (Opcode.HALT, "halt", "111111"),
        (Opcode.RTYPE, "rtype", "000000"),
    ],
)
def test_opcode_tables(opcode, name, bits):
    assert opcode_name(opcode) == name
    assert opcode_binary(opcode) == bits


def test_function_tables():
    assert function_name(Function.JR) == "jr"
    assert function_binary(Function.JR) == "010010"
    assert function_binary(Function.DONT_CARE) == "XXXXXX"


def test_register_tables():
    assert register_name(RegisterName.RZ) == "$rz"
    assert register_name(RegisterName.SPB) == "$spb"
    assert register_binary(RegisterName.RZ) == "00000"
    assert register_binary(RegisterName.RA) == "11111"


def test_opcode_encodings_unique_and_six_bits():
    codes = [opcode_binary(op) for op in Opcode]
    assert len(set(codes)) == len(codes)
    assert all(len(c) == 6 and set(c) <= {"0", "1"} for c in codes)


def test_register_encodings_follow_order():
    values = [int(register_binary(r), 2) for r in RegisterName]
    assert values == list(range(len(RegisterName)))


def test_every_member_has_names():
    assert len({instruction_name(i) for i in Instruction}) == len(Instruction)
    assert len({function_name(f) for f in Function}) == len(Function)


def test_emit_code_writes_line():
    out = io.StringIO()
    Emitter(out).emit_code("label L1")
    assert out.getvalue() == "label L1\n"


def test_emit_binary_uses_binary_stream():
    code, binary = io.StringIO(), io.StringIO()
    Emitter(code, binary).emit_binary("disk[0] <= 32'b0;")
    assert binary.getvalue() == "disk[0] <= 32'b0;\n"
    assert code.getvalue() == ""


def test_emit_binary_without_stream_raises():
    with pytest.raises(ValueError):
        Emitter(io.StringIO()).emit_binary("x")


def test_emit_comment_only_when_tracing():
    quiet = io.StringIO()
    Emitter(quiet, trace=False).emit_comment("note", 2)
    assert quiet.getvalue() == ""
    loud = io.StringIO()
    Emitter(loud, trace=True).emit_comment("note", 2)
    assert loud.getvalue() == "  # note\n"


def test_emit_object_code_indents():
    out = io.StringIO()
    Emitter(out).emit_object_code("addi", 3)
    assert out.getvalue() == "   addi\n"