"""Instruction, opcode, function and register tables, and code output."""

from __future__ import annotations

import enum
from typing import Optional, TextIO


class Instruction(enum.Enum):
    """Three-address intermediate instructions."""

    ADD = enum.auto()
    SUB = enum.auto()
    MULT = enum.auto()
    DIV = enum.auto()
    MOD = enum.auto()
    BITW_AND = enum.auto()
    BITW_OR = enum.auto()
    BITW_XOR = enum.auto()
    BITW_NOT = enum.auto()
    LOGIC_AND = enum.auto()
    LOGIC_OR = enum.auto()
    SHFT_LF = enum.auto()
    SHFT_RT = enum.auto()
    VEC = enum.auto()
    VEC_ADDR = enum.auto()
    EQ = enum.auto()
    NE = enum.auto()
    LT = enum.auto()
    LET = enum.auto()
    GT = enum.auto()
    GET = enum.auto()
    ASN = enum.auto()
    FUNC = enum.auto()
    RTN = enum.auto()
    GET_PARAM = enum.auto()
    SET_PARAM = enum.auto()
    CALL = enum.auto()
    PARAM_LIST = enum.auto()
    JPF = enum.auto()
    GOTO = enum.auto()
    LBL = enum.auto()
    SYSCALL = enum.auto()
    HALT = enum.auto()


class Opcode(enum.Enum):
    """Target machine opcodes."""

    ADDI = enum.auto()
    SUBI = enum.auto()
    MULI = enum.auto()
    DIVI = enum.auto()
    MODI = enum.auto()
    ANDI = enum.auto()
    ORI = enum.auto()
    XORI = enum.auto()
    NOT = enum.auto()
    LANDI = enum.auto()
    LORI = enum.auto()
    SLLI = enum.auto()
    SRLI = enum.auto()
    MOV = enum.auto()
    LW = enum.auto()
    LI = enum.auto()
    LA = enum.auto()
    SW = enum.auto()
    IN = enum.auto()
    OUT = enum.auto()
    JF = enum.auto()
    LDK = enum.auto()
    SDK = enum.auto()
    LAM = enum.auto()
    SAM = enum.auto()
    SIM = enum.auto()
    MMU_LOWER_IM = enum.auto()
    MMU_UPPER_IM = enum.auto()
    MMU_SELECT = enum.auto()
    LCD = enum.auto()
    LCD_PGMS = enum.auto()
    LCD_CURR = enum.auto()
    GIC = enum.auto()
    CIC = enum.auto()
    GIP = enum.auto()
    PRE_IO = enum.auto()
    SYSCALL = enum.auto()
    EXEC = enum.auto()
    EXEC_AGAIN = enum.auto()
    J = enum.auto()
    JTM = enum.auto()
    JAL = enum.auto()
    HALT = enum.auto()
    RTYPE = enum.auto()


class Function(enum.Enum):
    """Function field values of R-type instructions."""

    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    MOD = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    XOR = enum.auto()
    LAND = enum.auto()
    LOR = enum.auto()
    SLL = enum.auto()
    SRL = enum.auto()
    EQ = enum.auto()
    NE = enum.auto()
    LT = enum.auto()
    LET = enum.auto()
    GT = enum.auto()
    GET = enum.auto()
    JR = enum.auto()
    DONT_CARE = enum.auto()


class RegisterName(enum.Enum):
    """The 32 machine registers, in encoding order."""

    RZ = enum.auto()
    A0 = enum.auto()
    A1 = enum.auto()
    A2 = enum.auto()
    A3 = enum.auto()
    S0 = enum.auto()
    S1 = enum.auto()
    S2 = enum.auto()
    S3 = enum.auto()
    S4 = enum.auto()
    S5 = enum.auto()
    S6 = enum.auto()
    S7 = enum.auto()
    S8 = enum.auto()
    S9 = enum.auto()
    T0 = enum.auto()
    T1 = enum.auto()
    T2 = enum.auto()
    T3 = enum.auto()
    T4 = enum.auto()
    T5 = enum.auto()
    T6 = enum.auto()
    T7 = enum.auto()
    T8 = enum.auto()
    V0 = enum.auto()
    K0 = enum.auto()
    K1 = enum.auto()
    GPB = enum.auto()
    SPB = enum.auto()
    GP = enum.auto()
    SP = enum.auto()
    RA = enum.auto()


_INSTRUCTION_NAMES = dict(zip(Instruction, (
    "addition", "subtraction", "multiplication", "division", "modulo",
    "bitwise_and", "bitwise_or", "bitwise_xor", "not", "logical_and", "logical_or",
    "shift_left", "shift_right", "vector_value", "vector_address",
    "equal", "not_equal", "less_than", "less_than_equal_to",
    "greater_than", "greater_than_equal_to", "assign",
    "function", "return", "get_param", "set_param", "call", "param_list",
    "jump_if_false", "goto", "label", "syscall", "halt",
), strict=True))

_OPCODE_NAMES = dict(zip(Opcode, (
    "addi", "subi", "muli", "divi", "modi",
    "andi", "ori", "xori", "not", "landi", "lori",
    "slli", "srli",
    "mov", "lw", "li", "la", "sw",
    "in", "out", "jf",
    "ldk", "sdk", "lam", "sam", "sim",
    "mmuLowerIM", "mmuUpperIM", "mmuSelect",
    "lcd", "lcdPgms", "lcdCurr",
    "gic", "cic", "gip", "preIO",
    "syscall", "exec", "execAgain",
    "j", "jtm", "jal", "halt",
    "rtype",
), strict=True))

_FUNCTION_NAMES = dict(zip(Function, (
    "add", "sub", "mul", "div", "mod",
    "and", "or", "xor", "land", "lor",
    "sll", "srl",
    "eq", "ne", "lt", "let", "gt", "get",
    "jr",
    "dont_care",
), strict=True))

_REGISTER_NAMES = dict(zip(RegisterName, (
    "$rz", "$a0", "$a1", "$a2", "$a3", "$s0", "$s1", "$s2",
    "$s3", "$s4", "$s5", "$s6", "$s7", "$s8", "$s9", "$t0",
    "$t1", "$t2", "$t3", "$t4", "$t5", "$t6", "$t7", "$t8",
    "$v0", "$k0", "$k1", "$gpb", "$spb", "$gp", "$sp", "$ra",
), strict=True))

_OPCODE_BINARY = dict(zip(Opcode, (
    "000001", "000010", "000011", "000100", "000101",
    "000110", "000111", "001000", "001001", "001010", "001011",
    "001100", "001101",
    "001110", "001111", "010000", "010001", "010010",
    "010011", "010100", "010101",
    "010110", "010111", "011000", "011001", "011010",
    "011011", "011100", "011101",
    "011110", "011111", "100000",
    "100001", "100010", "100011", "100100",
    "111001", "111010", "111011",
    "111100", "111101", "111110", "111111",
    "000000",
), strict=True))

_FUNCTION_BINARY = dict(zip(Function, (
    "000000", "000001", "000010", "000011", "000100",
    "000101", "000110", "000111", "001000", "001001",
    "001010", "001011",
    "001100", "001101", "001110", "001111", "010000", "010001",
    "010010",
    "XXXXXX",
), strict=True))

_REGISTER_BINARY = {
    register: format(index, "05b") for index, register in enumerate(RegisterName)
}


def instruction_name(instruction: Instruction) -> str:
    """Name of an intermediate instruction as shown in listings."""
    return _INSTRUCTION_NAMES[instruction]


def opcode_name(opcode: Opcode) -> str:
    """Assembly mnemonic of an opcode."""
    return _OPCODE_NAMES[opcode]


def function_name(function: Function) -> str:
    """Assembly mnemonic of an R-type function."""
    return _FUNCTION_NAMES[function]


def register_name(register: RegisterName) -> str:
    """Assembly name of a register, such as ``$sp``."""
    return _REGISTER_NAMES[register]


def opcode_binary(opcode: Opcode) -> str:
    """Six-bit encoding of an opcode."""
    return _OPCODE_BINARY[opcode]


def function_binary(function: Function) -> str:
    """Six-bit encoding of an R-type function."""
    return _FUNCTION_BINARY[function]


def register_binary(register: RegisterName) -> str:
    """Five-bit encoding of a register."""
    return _REGISTER_BINARY[register]


class Emitter:
    """Writes generated code to a code stream and a binary stream."""

    def __init__(
        self,
        code: TextIO,
        binary: Optional[TextIO] = None,
        trace: bool = False,
    ) -> None:
        self.code = code
        self.binary = binary
        self.trace = trace

    def emit_code(self, text: str) -> None:
        """Write one line to the code stream."""
        self.code.write(f"{text}\n")

    def emit_binary(self, text: str) -> None:
        """Write one line to the binary stream."""
        if self.binary is None:
            raise ValueError("no binary output stream")
        self.binary.write(f"{text}\n")

    def emit_comment(self, text: str, indent: int = 0) -> None:
        """Write an indented comment line, only when tracing."""
        if self.trace:
            self.code.write(" " * indent + f"# {text}\n")

    def emit_object_code(self, text: str, indent: int = 0) -> None:
        """Write an indented line of object code."""
        self.code.write(" " * indent + f"{text}\n")