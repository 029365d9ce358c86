"""Growable, index-addressed storage for emitted instructions."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from .errors import CapacityError, InvalidReferenceError
from .instructions import Instruction

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_CAPACITY = 16
DEFAULT_GROWTH_FACTOR = 4


class InstructionArena:
    """Own every instruction of one building session.

    References handed out by :meth:`allocate_slot` are plain indices, so
    relocating the backing storage during growth never invalidates them.
    With ``growable=False`` the arena keeps whatever capacity was reserved and
    overflowing it raises :class:`CapacityError`.
    """

    def __init__(
        self,
        *,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        growth_factor: int = DEFAULT_GROWTH_FACTOR,
        growable: bool = True,
    ) -> None:
        if initial_capacity < 0:
            raise ValueError("initial capacity must be non-negative")
        if growth_factor < 2:
            raise ValueError("growth factor must be at least 2")
        self.initial_capacity = initial_capacity
        self.growth_factor = growth_factor
        self.growable = growable
        self.reallocations = 0
        self._slots: List[Optional[Instruction]] = []
        self._used = 0
        if not growable and initial_capacity:
            self.reserve(initial_capacity)

    # ------------------------------------------------------------------
    # capacity management
    # ------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def used(self) -> int:
        return self._used

    def reserve(self, capacity: int) -> None:
        """Resize storage to hold at least ``capacity`` instructions."""

        if capacity <= self.capacity:
            return
        self._relocate(capacity)

    def _relocate(self, capacity: int) -> None:
        storage: List[Optional[Instruction]] = [None] * capacity
        storage[: self._used] = self._slots[: self._used]
        previous = self.capacity
        self._slots = storage
        self.reallocations += 1
        logger.debug("instruction pool resized %d -> %d slots", previous, capacity)

    def _grow(self) -> None:
        if self.capacity == 0:
            self._relocate(self.initial_capacity or DEFAULT_INITIAL_CAPACITY)
        else:
            self._relocate(self.capacity * self.growth_factor)

    # ------------------------------------------------------------------
    # slot access
    # ------------------------------------------------------------------
    def allocate_slot(self) -> int:
        """Reserve the next index and return it."""

        if self._used >= self.capacity:
            if not self.growable:
                raise CapacityError(self.capacity)
            self._grow()
        ref = self._used
        self._used += 1
        return ref

    def write(self, ref: int, instruction: Instruction) -> None:
        self._check_allocated(ref)
        self._slots[ref] = instruction

    def read(self, ref: int) -> Instruction:
        self._check_allocated(ref)
        instruction = self._slots[ref]
        if instruction is None:
            raise InvalidReferenceError(f"slot %{ref} was allocated but never written")
        return instruction

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, int) or isinstance(ref, bool):
            return False
        return 0 <= ref < self._used

    def __len__(self) -> int:
        return self._used

    def __iter__(self) -> Iterator[Instruction]:
        for ref in range(self._used):
            yield self.read(ref)

    def instructions(self) -> Tuple[Instruction, ...]:
        """Snapshot of the pool in index order."""

        return tuple(self)

    def _check_allocated(self, ref: int) -> None:
        if not isinstance(ref, int) or isinstance(ref, bool) or not 0 <= ref < self._used:
            raise InvalidReferenceError(
                f"reference {ref!r} outside allocated range [0, {self._used})"
            )


__all__ = ["InstructionArena", "DEFAULT_INITIAL_CAPACITY", "DEFAULT_GROWTH_FACTOR"]
