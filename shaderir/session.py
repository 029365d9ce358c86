"""Explicit IR-building session.

A session owns exactly one arena, emitter and resolver.  Front ends hold a
reference to the session they trace into instead of reaching for a shared
"active" builder, so independent sessions can be used side by side (or one
per thread) without any locking.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple

from .arena import InstructionArena
from .config import BuilderConfig
from .control_flow import ControlFlowResolver
from .disassembler import IRDisassembler
from .emitter import IREmitter
from .errors import UnbalancedControlFlowError
from .instructions import Instruction, Qualifier, TypeKind


class BuilderSession:
    """Builder surface consumed by the tracing front end."""

    def __init__(self, config: Optional[BuilderConfig] = None) -> None:
        self.config = config or BuilderConfig()
        self.arena = InstructionArena(
            initial_capacity=self.config.initial_capacity,
            growth_factor=self.config.growth_factor,
            growable=self.config.growable,
        )
        self.emitter = IREmitter(self.arena)
        self.resolver = ControlFlowResolver(self.emitter)

    # ------------------------------------------------------------------
    # plain emission
    # ------------------------------------------------------------------
    def emit_global(self, type_ref: int, binding: int, qualifier: Qualifier) -> int:
        return self.emitter.emit_global(type_ref, binding, qualifier)

    def emit_type(self, kind: TypeKind) -> int:
        return self.emitter.emit_type(kind)

    def emit_constant(self, values: Sequence[float]) -> int:
        return self.emitter.emit_constant(values)

    def emit_list_node(self, item_ref: int, next_ref: Optional[int] = None) -> int:
        return self.emitter.emit_list_node(item_ref, next_ref)

    def emit_construct(self, type_ref: int, args_ref: int) -> int:
        return self.emitter.emit_construct(type_ref, args_ref)

    def emit_store(self, dst_ref: int, src_ref: int) -> int:
        return self.emitter.emit_store(dst_ref, src_ref)

    def emit_arguments(self, item_refs: Sequence[int]) -> int:
        return self.emitter.emit_arguments(item_refs)

    # ------------------------------------------------------------------
    # composite helpers used by the shader front end
    # ------------------------------------------------------------------
    def construct_vec4(self, values: Sequence[float]) -> int:
        """Emit ``vec4(values)`` and return the Construct reference.

        A single value is broadcast to every lane, matching ``vec4(1.0)``.
        """

        if len(values) == 1:
            values = list(values) * TypeKind.VEC4.lanes
        type_ref = self.emit_type(TypeKind.VEC4)
        constant_ref = self.emit_constant(values)
        args_ref = self.emit_arguments([constant_ref])
        return self.emit_construct(type_ref, args_ref)

    def declare_global(self, kind: TypeKind, binding: int, qualifier: Qualifier) -> int:
        type_ref = self.emit_type(kind)
        return self.emit_global(type_ref, binding, qualifier)

    def store_output(self, binding: int, src_ref: int, kind: TypeKind = TypeKind.VEC4) -> int:
        """Assign ``src_ref`` to the output variable at ``binding``."""

        dst_ref = self.declare_global(kind, binding, Qualifier.OUT)
        return self.emit_store(dst_ref, src_ref)

    # ------------------------------------------------------------------
    # control flow
    # ------------------------------------------------------------------
    def open_cond(self, cond_ref: int) -> int:
        return self.resolver.open_cond(cond_ref)

    def open_elif(self, cond_ref: Optional[int] = None) -> int:
        return self.resolver.open_elif(cond_ref)

    def close(self) -> int:
        return self.resolver.close()

    @contextmanager
    def conditional(self, cond_ref: int) -> Iterator[int]:
        """Open an ``if`` chain and close it when the block exits normally.

        ``elif``/``else`` arms may be opened inside the block.  When the block
        raises, the chain stays open and the exception propagates.
        """

        ref = self.open_cond(cond_ref)
        yield ref
        self.close()

    # ------------------------------------------------------------------
    # results
    # ------------------------------------------------------------------
    def instructions(self) -> Tuple[Instruction, ...]:
        return self.arena.instructions()

    def finish(self) -> Tuple[Instruction, ...]:
        """Return the finished pool; every conditional chain must be closed."""

        if not self.resolver.is_balanced:
            pending = ", ".join(f"%{ref}" for ref in self.resolver.pending)
            raise UnbalancedControlFlowError(f"unclosed conditional chains at {pending}")
        return self.instructions()

    def disassemble(self, *, header: Optional[bool] = None) -> str:
        if header is None:
            header = self.config.header
        return IRDisassembler().render(self.arena, header=header)


__all__ = ["BuilderSession"]
