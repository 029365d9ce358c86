"""Textual rendering of the instruction pool."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .arena import InstructionArena
from .instructions import (
    CondBranch,
    Constant,
    Construct,
    ElifBranch,
    EndMarker,
    GlobalBinding,
    Instruction,
    ListNode,
    Store,
    TypeDecl,
)

Pool = Union[InstructionArena, Sequence[Instruction]]

UNKNOWN = "<unknown>"


def _ref(ref: Optional[int]) -> str:
    return "%?" if ref is None else f"%{ref}"


class IRDisassembler:
    """Render instructions into the stable, line-per-instruction listing.

    The line bodies are a compatibility contract with golden outputs, so the
    wording of each branch below must not drift.  Rendering is read-only and
    total: anything outside the known instruction set becomes ``<unknown>``.
    """

    def format_instruction(self, instruction: object) -> str:
        if isinstance(instruction, GlobalBinding):
            return (
                f"global: %{instruction.type_ref} = "
                f"({instruction.qualifier.value}, {instruction.binding})"
            )
        if isinstance(instruction, TypeDecl):
            return f"type: {instruction.kind.value}"
        if isinstance(instruction, Constant):
            lanes = ", ".join(f"{value:.2f}" for value in instruction.values)
            return f"primitive: ({lanes})"
        if isinstance(instruction, ListNode):
            tail = "(nil)" if instruction.next_ref is None else f"%{instruction.next_ref}"
            return f"list: %{instruction.item_ref} -> {tail}"
        if isinstance(instruction, Construct):
            return f"construct: %{instruction.type_ref} = %{instruction.args_ref}"
        if isinstance(instruction, Store):
            return f"store %{instruction.src_ref} -> %{instruction.dst_ref}"
        if isinstance(instruction, CondBranch):
            return f"cond %{instruction.cond_ref} -> {_ref(instruction.fail_target)}"
        if isinstance(instruction, ElifBranch):
            cond = "(nil)" if instruction.cond_ref is None else f"%{instruction.cond_ref}"
            return f"elif {cond} -> {_ref(instruction.fail_target)}"
        if isinstance(instruction, EndMarker):
            return "end"
        return UNKNOWN

    def render_lines(self, pool: Pool, *, header: bool = True) -> List[str]:
        instructions = list(pool)
        lines: List[str] = []
        if header:
            capacity = pool.capacity if isinstance(pool, InstructionArena) else len(instructions)
            lines.append(f"GLOBALS ({len(instructions):4d}/{capacity:4d})")
        lines.extend(self._render_body(instructions))
        return lines

    def render(self, pool: Pool, *, header: bool = True) -> str:
        return "\n".join(self.render_lines(pool, header=header)) + "\n"

    def write(self, pool: Pool, output_path: Path, *, header: bool = True) -> None:
        output_path.write_text(self.render(pool, header=header), "utf-8")

    def _render_body(self, instructions: Iterable[object]) -> Iterable[str]:
        for index, instruction in enumerate(instructions):
            yield f"[{index:4d}]: {self.format_instruction(instruction)}"


__all__ = ["IRDisassembler", "UNKNOWN"]
