"""Append-only instruction emission on top of :class:`InstructionArena`."""

from __future__ import annotations

from typing import Optional, Sequence

from .arena import InstructionArena
from .errors import InternalInconsistencyError, InvalidReferenceError
from .instructions import (
    BranchInstruction,
    Constant,
    Construct,
    GlobalBinding,
    Instruction,
    ListNode,
    Qualifier,
    Store,
    TypeDecl,
    TypeKind,
)


class IREmitter:
    """Sole writer of the instruction pool.

    Every instruction enters through :meth:`emit`.  Operands must already be
    in the pool, which keeps each non-backpatch reference pointing at a
    strictly smaller index.  The only in-place change ever made afterwards is
    :meth:`patch_fail_target`, reserved for the control-flow resolver.
    """

    def __init__(self, arena: Optional[InstructionArena] = None) -> None:
        self.arena = arena if arena is not None else InstructionArena()

    def emit(self, instruction: Instruction) -> int:
        if not isinstance(instruction, Instruction):
            raise TypeError(f"cannot emit {type(instruction)!r}")
        for ref in instruction.operand_refs():
            if ref is None:
                raise InvalidReferenceError(
                    f"{type(instruction).__name__} is missing a required operand"
                )
            if ref not in self.arena:
                raise InvalidReferenceError(
                    f"{type(instruction).__name__} references %{ref} which has not been emitted"
                )
        if isinstance(instruction, BranchInstruction) and instruction.is_resolved:
            raise InternalInconsistencyError(
                "branch instructions must be emitted with an unresolved fail target"
            )
        ref = self.arena.allocate_slot()
        self.arena.write(ref, instruction)
        return ref

    # ------------------------------------------------------------------
    # typed helpers
    # ------------------------------------------------------------------
    def emit_global(self, type_ref: int, binding: int, qualifier: Qualifier) -> int:
        return self.emit(GlobalBinding(type_ref, binding, Qualifier(qualifier)))

    def emit_type(self, kind: TypeKind) -> int:
        return self.emit(TypeDecl(TypeKind(kind)))

    def emit_constant(self, values: Sequence[float]) -> int:
        return self.emit(Constant.from_values(values))

    def emit_list_node(self, item_ref: int, next_ref: Optional[int] = None) -> int:
        return self.emit(ListNode(item_ref, next_ref))

    def emit_construct(self, type_ref: int, args_ref: int) -> int:
        return self.emit(Construct(type_ref, args_ref))

    def emit_store(self, dst_ref: int, src_ref: int) -> int:
        return self.emit(Store(dst_ref, src_ref))

    def emit_arguments(self, item_refs: Sequence[int]) -> int:
        """Link ``item_refs`` into a ListNode chain and return its head.

        Nodes are emitted tail first so that every ``next_ref`` points at an
        earlier index; the head is therefore the last node emitted.
        """

        if not item_refs:
            raise ValueError("argument list requires at least one item")
        for ref in item_refs:
            if ref not in self.arena:
                raise InvalidReferenceError(f"argument %{ref} has not been emitted")
        head = self.emit_list_node(item_refs[-1])
        for item_ref in reversed(item_refs[:-1]):
            head = self.emit_list_node(item_ref, head)
        return head

    # ------------------------------------------------------------------
    # backpatching channel
    # ------------------------------------------------------------------
    def patch_fail_target(self, ref: int, target: int) -> BranchInstruction:
        """Resolve the branch at ``ref`` to continue at ``target``."""

        instruction = self.arena.read(ref)
        if not isinstance(instruction, BranchInstruction):
            raise InternalInconsistencyError(
                f"instruction %{ref} is not conditional", ref=ref
            )
        if instruction.is_resolved:
            raise InternalInconsistencyError(
                f"fail target of %{ref} already resolved to %{instruction.fail_target}",
                ref=ref,
            )
        if target not in self.arena or target <= ref:
            raise InvalidReferenceError(f"fail target %{target} must follow branch %{ref}")
        resolved = instruction.resolve(target)
        self.arena.write(ref, resolved)
        return resolved


__all__ = ["IREmitter"]
