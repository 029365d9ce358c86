"""Dataclasses describing the closed instruction set of the shader IR."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

LANES = 4


class Qualifier(Enum):
    """Direction of a shader-interface binding."""

    IN = "layout input"
    OUT = "layout output"


class TypeKind(Enum):
    """Primitive and aggregate type descriptors."""

    BOOL = "bool"
    INT32 = "int"
    FLOAT32 = "float"
    VEC4 = "vec4"

    @property
    def lanes(self) -> int:
        """Number of meaningful :class:`Constant` lanes for this type."""

        return LANES if self is TypeKind.VEC4 else 1


@dataclass(frozen=True)
class Instruction:
    """Base class for all pool instructions.

    Subclasses are frozen so a stored instruction can only change by being
    replaced in the arena, which the control-flow resolver does exactly once
    per branch.
    """

    def operand_refs(self) -> Tuple[int, ...]:
        """Backward references held in non-backpatch fields."""

        return ()


@dataclass(frozen=True)
class GlobalBinding(Instruction):
    """Shader-interface variable of ``type_ref`` at a numeric binding slot."""

    type_ref: int
    binding: int
    qualifier: Qualifier

    def __post_init__(self) -> None:
        object.__setattr__(self, "qualifier", Qualifier(self.qualifier))

    def operand_refs(self) -> Tuple[int, ...]:
        return (self.type_ref,)


@dataclass(frozen=True)
class TypeDecl(Instruction):
    kind: TypeKind

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TypeKind(self.kind))


@dataclass(frozen=True)
class Constant(Instruction):
    """Inline literal payload; only the first ``kind.lanes`` lanes matter."""

    values: Tuple[float, float, float, float]

    def __post_init__(self) -> None:
        if len(self.values) != LANES:
            raise ValueError(f"constant payload must have {LANES} lanes, got {len(self.values)}")
        object.__setattr__(self, "values", tuple(float(value) for value in self.values))

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "Constant":
        if len(values) > LANES:
            raise ValueError(f"constant payload holds at most {LANES} lanes")
        padded = [float(value) for value in values]
        padded.extend([0.0] * (LANES - len(padded)))
        return cls(tuple(padded))


@dataclass(frozen=True)
class ListNode(Instruction):
    """One node of a singly linked argument list."""

    item_ref: int
    next_ref: Optional[int] = None

    def operand_refs(self) -> Tuple[int, ...]:
        if self.next_ref is None:
            return (self.item_ref,)
        return (self.item_ref, self.next_ref)


@dataclass(frozen=True)
class Construct(Instruction):
    """Build a value of ``type_ref`` from the list headed by ``args_ref``."""

    type_ref: int
    args_ref: int

    def operand_refs(self) -> Tuple[int, ...]:
        return (self.type_ref, self.args_ref)


@dataclass(frozen=True)
class Store(Instruction):
    dst_ref: int
    src_ref: int

    def operand_refs(self) -> Tuple[int, ...]:
        return (self.dst_ref, self.src_ref)


@dataclass(frozen=True)
class BranchInstruction(Instruction):
    """Common shape of the conditional instructions.

    ``fail_target`` is the only forward reference in the pool.  It starts as
    ``None`` and is filled in once when the matching ``elif`` or ``end`` is
    emitted.
    """

    cond_ref: Optional[int]
    fail_target: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.fail_target is not None

    def resolve(self, target: int) -> "BranchInstruction":
        return replace(self, fail_target=target)

    def operand_refs(self) -> Tuple[int, ...]:
        if self.cond_ref is None:
            return ()
        return (self.cond_ref,)


@dataclass(frozen=True)
class CondBranch(BranchInstruction):
    """Start of an ``if`` chain."""

    cond_ref: int
    fail_target: Optional[int] = None

    def operand_refs(self) -> Tuple[int, ...]:
        return (self.cond_ref,)


@dataclass(frozen=True)
class ElifBranch(BranchInstruction):
    """Continuation arm; a missing ``cond_ref`` encodes ``else``."""

    cond_ref: Optional[int] = None
    fail_target: Optional[int] = None

    @property
    def is_else(self) -> bool:
        return self.cond_ref is None


@dataclass(frozen=True)
class EndMarker(Instruction):
    """Join point closing a conditional chain."""


__all__ = [
    "LANES",
    "Qualifier",
    "TypeKind",
    "Instruction",
    "GlobalBinding",
    "TypeDecl",
    "Constant",
    "ListNode",
    "Construct",
    "Store",
    "BranchInstruction",
    "CondBranch",
    "ElifBranch",
    "EndMarker",
]
