"""Helpers to serialise the instruction pool for offline analysis."""

from __future__ import annotations

from typing import Any, Dict, Iterable

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


def serialize_instruction(instruction: Instruction) -> Dict[str, Any]:
    """Convert an instruction into a dictionary with an explicit ``op`` tag."""

    if isinstance(instruction, GlobalBinding):
        return {
            "op": "global",
            "type": instruction.type_ref,
            "binding": instruction.binding,
            "qualifier": instruction.qualifier.name.lower(),
        }
    if isinstance(instruction, TypeDecl):
        return {"op": "type", "kind": instruction.kind.value}
    if isinstance(instruction, Constant):
        return {"op": "primitive", "values": list(instruction.values)}
    if isinstance(instruction, ListNode):
        return {"op": "list", "item": instruction.item_ref, "next": instruction.next_ref}
    if isinstance(instruction, Construct):
        return {"op": "construct", "type": instruction.type_ref, "args": instruction.args_ref}
    if isinstance(instruction, Store):
        return {"op": "store", "dst": instruction.dst_ref, "src": instruction.src_ref}
    if isinstance(instruction, CondBranch):
        return {"op": "cond", "cond": instruction.cond_ref, "fail_target": instruction.fail_target}
    if isinstance(instruction, ElifBranch):
        return {"op": "elif", "cond": instruction.cond_ref, "fail_target": instruction.fail_target}
    if isinstance(instruction, EndMarker):
        return {"op": "end"}
    raise TypeError(f"unsupported instruction type: {type(instruction)!r}")


def serialize_program(instructions: Iterable[Instruction]) -> Dict[str, Any]:
    """Serialise a whole pool; list position equals instruction reference."""

    return {"instructions": [serialize_instruction(item) for item in instructions]}


__all__ = ["serialize_instruction", "serialize_program"]
