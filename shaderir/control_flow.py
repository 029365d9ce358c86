"""Single-pass backpatching of conditional chains.

The resolver keeps a LIFO of branch instructions whose continuation is not
known yet.  Emitting an ``elif`` resolves the arm on top of the stack to the
new arm; emitting ``end`` resolves it to the join point.  Nested chains need
no extra bookkeeping because an inner chain is always closed before its
enclosing arm continues.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .disassembler import IRDisassembler
from .emitter import IREmitter
from .errors import InternalInconsistencyError, UnbalancedControlFlowError
from .instructions import BranchInstruction, CondBranch, ElifBranch, EndMarker

logger = logging.getLogger(__name__)


class ControlFlowResolver:
    """Wire ``fail_target`` fields for ``if/elif*/else?/end`` chains."""

    def __init__(self, emitter: IREmitter) -> None:
        self.emitter = emitter
        self._pending: List[int] = []

    @property
    def depth(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> Tuple[int, ...]:
        return tuple(self._pending)

    @property
    def is_balanced(self) -> bool:
        return not self._pending

    def open_cond(self, cond_ref: int) -> int:
        ref = self.emitter.emit(CondBranch(cond_ref))
        self._pending.append(ref)
        return ref

    def open_elif(self, cond_ref: Optional[int] = None) -> int:
        """Emit the next arm; ``cond_ref=None`` is an ``else``."""

        top = self._peek("elif")
        current = self.emitter.arena.read(top)
        if isinstance(current, ElifBranch) and current.is_else:
            raise UnbalancedControlFlowError(
                f"elif after else arm %{top}; close the chain first"
            )
        ref = self.emitter.emit(ElifBranch(cond_ref))
        self._resolve(self._pending.pop(), ref)
        self._pending.append(ref)
        return ref

    def close(self) -> int:
        self._peek("end")
        ref = self.emitter.emit(EndMarker())
        self._resolve(self._pending.pop(), ref)
        return ref

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _peek(self, operation: str) -> int:
        if not self._pending:
            raise UnbalancedControlFlowError(f"{operation} without an open conditional")
        return self._pending[-1]

    def _resolve(self, ref: int, target: int) -> None:
        instruction = self.emitter.arena.read(ref)
        if not isinstance(instruction, BranchInstruction):
            rendered = IRDisassembler().format_instruction(instruction)
            logger.error("op %%%d not conditional, is actually: %s", ref, rendered)
            raise InternalInconsistencyError(
                f"op %{ref} not conditional, is actually", ref=ref, rendered=rendered
            )
        self.emitter.patch_fail_target(ref, target)


__all__ = ["ControlFlowResolver"]
