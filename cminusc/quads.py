"""Three-address intermediate code: operands, quadruples and their list."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from cminusc.code import Instruction, instruction_name


class OperandKind(enum.Enum):
    INT_CONST = enum.auto()
    STRING = enum.auto()


@dataclass(eq=False)
class Operand:
    """An integer constant or a named operand (variable, temporary, label)."""

    kind: OperandKind
    value: int = 0
    name: Optional[str] = None
    scope: Any = None

    @classmethod
    def constant(cls, value: int) -> "Operand":
        """An integer constant operand."""
        return cls(OperandKind.INT_CONST, value=value)

    @classmethod
    def named(cls, name: str, scope: Any = None) -> "Operand":
        """A named operand, optionally tied to the scope that declares it."""
        return cls(OperandKind.STRING, name=name, scope=scope)

    def format(self) -> str:
        """The operand as shown in the intermediate code listing."""
        if self.kind is OperandKind.STRING:
            return self.name or ""
        return str(self.value)


def _format_operand(operand: Optional[Operand]) -> str:
    return "_" if operand is None else operand.format()


@dataclass(eq=False)
class Quadruple:
    """One intermediate instruction with up to three operands."""

    instruction: Instruction
    line: int
    op1: Optional[Operand] = None
    op2: Optional[Operand] = None
    op3: Optional[Operand] = None
    display: Optional[int] = None
    offset: int = 0

    def format(self) -> str:
        """The quadruple as one listing line, ``_`` marking a missing operand."""
        operands = ", ".join(
            _format_operand(op) for op in (self.op1, self.op2, self.op3)
        )
        return f"{self.line}: ({instruction_name(self.instruction)}, {operands})"


class QuadList:
    """The ordered intermediate code of one compilation.

    Quadruples are numbered from 1 in the order they are created, which may
    differ from the order they are appended.
    """

    def __init__(self) -> None:
        self._quads: list[Quadruple] = []
        self._counter = 0

    def create(
        self,
        instruction: Instruction,
        op1: Optional[Operand] = None,
        op2: Optional[Operand] = None,
        op3: Optional[Operand] = None,
    ) -> Quadruple:
        """Create a numbered quadruple without appending it."""
        self._counter += 1
        return Quadruple(instruction, self._counter, op1, op2, op3)

    def append(self, quad: Quadruple) -> Quadruple:
        """Append a quadruple to the end of the code and return it."""
        self._quads.append(quad)
        return quad

    def last(self) -> Optional[Quadruple]:
        """The most recently appended quadruple, or None when empty."""
        return self._quads[-1] if self._quads else None

    def __iter__(self) -> Iterator[Quadruple]:
        return iter(self._quads)

    def __len__(self) -> int:
        return len(self._quads)

    def format_lines(self) -> list[str]:
        """Every quadruple formatted, in code order."""
        return [quad.format() for quad in self._quads]