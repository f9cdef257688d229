"""Command-line argument handling for the compiler."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from cminusc.tree import CodeInfo, CodeType


class ArgumentError(Exception):
    """The command line was malformed."""


class HelpRequested(Exception):
    """The user asked for the list of options."""


def usage_text(program: str) -> str:
    """The usage line shown for wrong arguments."""
    return f"Uso: {program} <arquivo> <opção>"


def options_text() -> str:
    """The help text listing the compiler's options."""
    return (
        "Compilador C- para a máquina iZero...\n"
        "Opções:\n"
        "\t-b, --bios\tCompila código para a bios\n"
        "\t-k, --kernel\tCompila código para o kernel\n"
        "\t-h, --help\tExibe este menu\n"
        "\toffset (int)\tOffset na compilação do código\n"
        "O padrão é compilar o código de um programa normal sem offset.\n"
    )


def has_help_option(argv: Sequence[str]) -> bool:
    """True if any argument asks for help."""
    return any(arg in ("-h", "--help") for arg in argv)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def parse_arguments(argv: Sequence[str]) -> CodeInfo:
    """Interpret a full argument vector, program name first.

    Raises HelpRequested for -h/--help, ArgumentError for a wrong number
    of arguments and FileNotFoundError when the source file is missing.
    """
    program = argv[0] if argv else "cminusc"
    if len(argv) < 2:
        raise ArgumentError(usage_text(program))
    if has_help_option(argv):
        raise HelpRequested(options_text())

    pgm = argv[1]
    if "." not in pgm:
        pgm += ".c"
    if not Path(pgm).is_file():
        raise FileNotFoundError(f"Arquivo {pgm} não encontrado!")

    if len(argv) == 2:
        return CodeInfo(CodeType.PROGRAM, pgm, 0)
    if len(argv) == 3:
        option = argv[2]
        if option in ("-k", "--kernel"):
            return CodeInfo(CodeType.KERNEL, pgm, 0)
        if option in ("-b", "--bios"):
            return CodeInfo(CodeType.BIOS, pgm, 0)
        return CodeInfo(CodeType.PROGRAM, pgm, _atoi(option))
    raise ArgumentError(usage_text(program))