"""Exception hierarchy raised by the IR builder."""

from __future__ import annotations

from typing import Optional, Sequence


class IRBuildError(Exception):
    """Base class for every failure reported by the builder."""


class CapacityError(IRBuildError):
    """A fixed-capacity arena ran out of slots."""

    def __init__(self, capacity: int) -> None:
        super().__init__(
            f"exceeded instruction pool capacity ({capacity}), reserve beforehand"
        )
        self.capacity = capacity


class UnbalancedControlFlowError(IRBuildError):
    """``elif``/``end`` was requested without a matching open conditional."""


class InternalInconsistencyError(IRBuildError):
    """The resolver found a non-branch instruction where a branch was expected."""

    def __init__(self, message: str, *, ref: Optional[int] = None, rendered: str = "") -> None:
        if rendered:
            message = f"{message}: {rendered}"
        super().__init__(message)
        self.ref = ref
        self.rendered = rendered


class InvalidReferenceError(IRBuildError, IndexError):
    """A reference does not name an instruction that exists in the pool."""


class ValidationError(IRBuildError):
    """Static validation of an instruction pool found problems."""

    def __init__(self, issues: Sequence[object]) -> None:
        lines = [str(issue) for issue in issues]
        super().__init__("invalid program:\n  " + "\n  ".join(lines))
        self.issues = tuple(issues)


__all__ = [
    "IRBuildError",
    "CapacityError",
    "UnbalancedControlFlowError",
    "InternalInconsistencyError",
    "InvalidReferenceError",
    "ValidationError",
]
