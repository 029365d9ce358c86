"""Static checks over a finished instruction pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Type

from .errors import ValidationError
from .instructions import (
    BranchInstruction,
    Construct,
    ElifBranch,
    EndMarker,
    GlobalBinding,
    Instruction,
    ListNode,
    Store,
    TypeDecl,
)


@dataclass(frozen=True)
class ValidationIssue:
    index: int
    code: str
    message: str

    def __str__(self) -> str:
        return f"[{self.index}] {self.code}: {self.message}"


@dataclass
class ValidationReport:
    """Issues collected by :func:`validate_program`."""

    instruction_count: int
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def codes(self) -> Set[str]:
        return {issue.code for issue in self.issues}

    def raise_for_issues(self) -> None:
        if self.issues:
            raise ValidationError(self.issues)


def _is_ref(ref: object) -> bool:
    return isinstance(ref, int) and not isinstance(ref, bool)


class _Checker:
    def __init__(self, instructions: Sequence[object]) -> None:
        self.instructions = instructions
        self.issues: List[ValidationIssue] = []

    def report(self, index: int, code: str, message: str) -> None:
        self.issues.append(ValidationIssue(index, code, message))

    def expect(
        self, index: int, ref: int, expected: Type[Instruction], role: str
    ) -> None:
        if not _is_ref(ref) or not 0 <= ref < len(self.instructions):
            return
        target = self.instructions[ref]
        if not isinstance(target, expected):
            self.report(
                index,
                "operand-kind",
                f"{role} %{ref} is {type(target).__name__}, expected {expected.__name__}",
            )

    def run(self) -> List[ValidationIssue]:
        for index, instruction in enumerate(self.instructions):
            if not isinstance(instruction, Instruction):
                self.report(index, "unknown-instruction", f"{type(instruction).__name__} is not an instruction")
                continue
            self.check_ordering(index, instruction)
            self.check_operands(index, instruction)
        return self.issues

    def check_ordering(self, index: int, instruction: Instruction) -> None:
        for ref in instruction.operand_refs():
            if not _is_ref(ref):
                self.report(index, "missing-operand", f"operand {ref!r} is not a reference")
            elif not 0 <= ref < index:
                self.report(index, "forward-reference", f"operand %{ref} does not precede %{index}")
        if isinstance(instruction, BranchInstruction):
            self.check_fail_target(index, instruction)

    def check_fail_target(self, index: int, branch: BranchInstruction) -> None:
        target = branch.fail_target
        if target is None:
            self.report(index, "unresolved-branch", "fail target was never resolved")
            return
        if not index < target < len(self.instructions):
            self.report(index, "bad-fail-target", f"fail target %{target} is out of range")
            return
        if not isinstance(self.instructions[target], (ElifBranch, EndMarker)):
            self.report(
                index,
                "bad-fail-target",
                f"fail target %{target} is {type(self.instructions[target]).__name__}",
            )

    def check_operands(self, index: int, instruction: Instruction) -> None:
        if isinstance(instruction, GlobalBinding):
            self.expect(index, instruction.type_ref, TypeDecl, "type")
        elif isinstance(instruction, Construct):
            self.expect(index, instruction.type_ref, TypeDecl, "type")
            self.expect(index, instruction.args_ref, ListNode, "arguments")
            self.check_chain(index, instruction.args_ref)
        elif isinstance(instruction, Store):
            self.expect(index, instruction.dst_ref, GlobalBinding, "destination")

    def check_chain(self, index: int, head: int) -> None:
        seen: Set[int] = set()
        ref: Optional[int] = head
        while ref is not None:
            if not _is_ref(ref) or not 0 <= ref < len(self.instructions):
                self.report(index, "bad-list", f"list link %{ref} is out of range")
                return
            if ref in seen:
                self.report(index, "list-cycle", f"argument list starting at %{head} revisits %{ref}")
                return
            seen.add(ref)
            node = self.instructions[ref]
            if not isinstance(node, ListNode):
                self.report(index, "bad-list", f"list link %{ref} is {type(node).__name__}")
                return
            ref = node.next_ref


def list_items(instructions: Sequence[Instruction], head: int) -> List[int]:
    """Return the item references of the chain starting at ``head``.

    The walk stops after ``len(instructions)`` links so a corrupt (cyclic)
    chain cannot loop forever; :func:`validate_program` reports such chains.
    """

    items: List[int] = []
    ref: Optional[int] = head
    for _ in range(len(instructions)):
        if ref is None:
            return items
        node = instructions[ref]
        if not isinstance(node, ListNode):
            raise ValueError(f"%{ref} is not a list node")
        items.append(node.item_ref)
        ref = node.next_ref
    if ref is not None:
        raise ValueError(f"argument list starting at %{head} does not terminate")
    return items


def validate_program(instructions: Iterable[object]) -> ValidationReport:
    """Check ordering, backpatch completeness and argument-list shape."""

    pool = list(instructions)
    report = ValidationReport(instruction_count=len(pool))
    report.issues.extend(_Checker(pool).run())
    return report


__all__ = ["ValidationIssue", "ValidationReport", "list_items", "validate_program"]
