from dataclasses import dataclass
from pathlib import Path

from shaderir import BuilderSession, IRDisassembler
from shaderir.instructions import (
    CondBranch,
    Constant,
    ElifBranch,
    EndMarker,
    GlobalBinding,
    Instruction,
    Qualifier,
    TypeDecl,
    TypeKind,
)

EXPECTED_STORE_PROGRAM = [
    "type: vec4",
    "primitive: (1.00, 1.00, 1.00, 1.00)",
    "list: %1 -> (nil)",
    "construct: %0 = %2",
    "type: vec4",
    "global: %4 = (layout output, 0)",
    "store %3 -> %5",
]


@dataclass(frozen=True)
class _FutureInstruction(Instruction):
    payload: int = 0


def _store_program() -> BuilderSession:
    session = BuilderSession()
    value = session.construct_vec4([1.0, 1.0, 1.0, 1.0])
    session.store_output(0, value)
    return session


def test_fixed_program_lines() -> None:
    session = _store_program()

    lines = IRDisassembler().render_lines(session.arena, header=False)

    assert lines == [
        f"[{index:4d}]: {body}" for index, body in enumerate(EXPECTED_STORE_PROGRAM)
    ]


def test_header_reports_used_and_capacity() -> None:
    session = _store_program()

    lines = IRDisassembler().render_lines(session.arena)

    assert lines[0] == "GLOBALS (   7/  16)"
    assert len(lines) == 8


def test_header_for_plain_sequence_uses_length() -> None:
    pool = [TypeDecl(TypeKind.BOOL)]

    assert IRDisassembler().render_lines(pool)[0] == "GLOBALS (   1/   1)"


def test_branch_formats() -> None:
    disassembler = IRDisassembler()

    assert disassembler.format_instruction(CondBranch(1, 4)) == "cond %1 -> %4"
    assert disassembler.format_instruction(ElifBranch(2, 7)) == "elif %2 -> %7"
    assert disassembler.format_instruction(ElifBranch(None, 9)) == "elif (nil) -> %9"
    assert disassembler.format_instruction(CondBranch(1)) == "cond %1 -> %?"
    assert disassembler.format_instruction(EndMarker()) == "end"


def test_scalar_formats() -> None:
    disassembler = IRDisassembler()

    assert disassembler.format_instruction(GlobalBinding(0, 2, Qualifier.IN)) == (
        "global: %0 = (layout input, 2)"
    )
    assert [
        disassembler.format_instruction(TypeDecl(kind)) for kind in TypeKind
    ] == ["type: bool", "type: int", "type: float", "type: vec4"]
    assert disassembler.format_instruction(Constant.from_values([0.125, -2.5])) == (
        "primitive: (0.12, -2.50, 0.00, 0.00)"
    )


def test_unknown_variant_is_rendered_as_placeholder() -> None:
    disassembler = IRDisassembler()

    assert disassembler.format_instruction(_FutureInstruction(3)) == "<unknown>"
    lines = disassembler.render_lines([TypeDecl(TypeKind.INT32), _FutureInstruction()], header=False)
    assert lines == ["[   0]: type: int", "[   1]: <unknown>"]


def test_render_does_not_mutate_and_writes_file(tmp_path: Path) -> None:
    session = _store_program()
    before = session.instructions()

    output = tmp_path / "program.ir.txt"
    IRDisassembler().write(session.arena, output)

    assert session.instructions() == before
    text = output.read_text("utf-8")
    assert text.endswith("store %3 -> %5\n")
    assert text.splitlines()[0].startswith("GLOBALS")
