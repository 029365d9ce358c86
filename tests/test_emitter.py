import pytest

from shaderir.disassembler import IRDisassembler
from shaderir.emitter import IREmitter
from shaderir.errors import InternalInconsistencyError, InvalidReferenceError
from shaderir.instructions import (
    CondBranch,
    Constant,
    Construct,
    GlobalBinding,
    ListNode,
    Qualifier,
    Store,
    TypeDecl,
    TypeKind,
)
from shaderir.validation import list_items


def test_typed_helpers_store_expected_instructions() -> None:
    emitter = IREmitter()
    type_ref = emitter.emit_type(TypeKind.VEC4)
    constant_ref = emitter.emit_constant([1.0, 2.0])
    list_ref = emitter.emit_list_node(constant_ref)
    construct_ref = emitter.emit_construct(type_ref, list_ref)
    global_ref = emitter.emit_global(type_ref, 3, Qualifier.OUT)
    store_ref = emitter.emit_store(global_ref, construct_ref)

    arena = emitter.arena
    assert arena.read(type_ref) == TypeDecl(TypeKind.VEC4)
    assert arena.read(constant_ref) == Constant((1.0, 2.0, 0.0, 0.0))
    assert arena.read(list_ref) == ListNode(constant_ref, None)
    assert arena.read(construct_ref) == Construct(type_ref, list_ref)
    assert arena.read(global_ref) == GlobalBinding(type_ref, 3, Qualifier.OUT)
    assert arena.read(store_ref) == Store(global_ref, construct_ref)
    assert store_ref == 5


def test_forward_reference_is_rejected_without_mutation() -> None:
    emitter = IREmitter()
    emitter.emit_type(TypeKind.BOOL)

    with pytest.raises(InvalidReferenceError, match="has not been emitted"):
        emitter.emit_global(1, 0, Qualifier.IN)

    assert emitter.arena.used == 1


def test_self_reference_is_rejected() -> None:
    emitter = IREmitter()

    with pytest.raises(InvalidReferenceError):
        emitter.emit_list_node(0)
    assert emitter.arena.used == 0


def test_constant_payload_limits() -> None:
    emitter = IREmitter()

    with pytest.raises(ValueError, match="at most 4 lanes"):
        emitter.emit_constant([0.0] * 5)
    with pytest.raises(ValueError, match="must have 4 lanes"):
        Constant((1.0, 2.0))


def test_emit_arguments_links_tail_first() -> None:
    emitter = IREmitter()
    items = [emitter.emit_constant([float(value)]) for value in range(3)]

    head = emitter.emit_arguments(items)

    pool = emitter.arena.instructions()
    assert list_items(pool, head) == items
    node = pool[head]
    steps = 1
    while node.next_ref is not None:
        assert node.next_ref < head
        node = pool[node.next_ref]
        steps += 1
    assert steps == len(items)


def test_emit_arguments_requires_items() -> None:
    emitter = IREmitter()

    with pytest.raises(ValueError, match="at least one item"):
        emitter.emit_arguments([])


def test_emit_rejects_non_instructions() -> None:
    emitter = IREmitter()

    with pytest.raises(TypeError):
        emitter.emit("type: vec4")


def test_resolved_branch_cannot_be_emitted() -> None:
    emitter = IREmitter()
    cond = emitter.emit_type(TypeKind.BOOL)

    with pytest.raises(InternalInconsistencyError, match="unresolved"):
        emitter.emit(CondBranch(cond, fail_target=5))


def test_patch_fail_target_is_write_once() -> None:
    emitter = IREmitter()
    cond = emitter.emit_type(TypeKind.BOOL)
    branch = emitter.emit(CondBranch(cond))
    first = emitter.emit_type(TypeKind.BOOL)
    second = emitter.emit_type(TypeKind.BOOL)

    resolved = emitter.patch_fail_target(branch, first)
    assert resolved.fail_target == first

    with pytest.raises(InternalInconsistencyError, match="already resolved"):
        emitter.patch_fail_target(branch, second)
    assert emitter.arena.read(branch).fail_target == first


def test_patch_fail_target_must_point_forward() -> None:
    emitter = IREmitter()
    cond = emitter.emit_type(TypeKind.BOOL)
    branch = emitter.emit(CondBranch(cond))

    with pytest.raises(InvalidReferenceError, match="must follow"):
        emitter.patch_fail_target(branch, cond)


def test_patch_fail_target_rejects_non_branch() -> None:
    emitter = IREmitter()
    ref = emitter.emit_type(TypeKind.BOOL)
    target = emitter.emit_type(TypeKind.BOOL)

    with pytest.raises(InternalInconsistencyError, match="not conditional"):
        emitter.patch_fail_target(ref, target)


def test_enum_fields_are_coerced_from_their_values() -> None:
    emitter = IREmitter()
    type_ref = emitter.emit(TypeDecl("vec4"))
    global_ref = emitter.emit(GlobalBinding(type_ref, 0, "layout output"))

    assert emitter.arena.read(type_ref).kind is TypeKind.VEC4
    assert emitter.arena.read(global_ref).qualifier is Qualifier.OUT
    assert IRDisassembler().render_lines(emitter.arena, header=False) == [
        "[   0]: type: vec4",
        "[   1]: global: %0 = (layout output, 0)",
    ]


def test_unknown_enum_values_fail_at_construction() -> None:
    with pytest.raises(ValueError):
        TypeDecl("vec5")
    with pytest.raises(ValueError):
        GlobalBinding(0, 0, "uniform")


def test_constant_values_are_stored_as_float_tuple() -> None:
    constant = Constant([1, 1, 1, 1])

    assert constant.values == (1.0, 1.0, 1.0, 1.0)
    assert all(isinstance(value, float) for value in constant.values)
    assert hash(constant) == hash(Constant.from_values([1.0, 1.0, 1.0, 1.0]))
