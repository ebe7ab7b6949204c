"""RawVec container behaviour and native splices."""
import array

import pytest

from vecsplice import (
    ALL_KINDS,
    AliasedSource,
    ContainerMismatch,
    ElementKindMismatch,
    ElementOutOfRange,
    IndexOutOfBounds,
    NotPlainData,
    RawVec,
    UnknownElementKind,
    splice,
    splice_clone,
    splice_copy,
)


def test_new_vec_has_no_storage(vec_factory):
    vec = vec_factory("i32")

    assert len(vec) == 0
    assert vec.capacity == 0
    assert vec.header.data is None
    assert vec.tolist() == []


def test_construct_from_items(vec_factory):
    vec = vec_factory("i32", [1, 2, 3])

    assert len(vec) == 3
    assert vec.capacity == 3
    assert vec == [1, 2, 3]
    assert vec[0] == 1
    assert vec[-1] == 3


def test_unknown_kind_is_rejected():
    with pytest.raises(UnknownElementKind):
        RawVec("i128")


def test_items_are_range_checked(vec_factory):
    with pytest.raises(ElementOutOfRange):
        vec_factory("u8", [256])
    with pytest.raises(ElementOutOfRange):
        vec_factory("i8", [-129])
    with pytest.raises(NotPlainData):
        vec_factory("i32", ["1"])


@pytest.mark.parametrize("kind", ALL_KINDS, ids=lambda kind: kind.name)
def test_splice_copy_for_every_kind(vec_factory, kind):
    vec = vec_factory(kind, [1, 2])

    splice_copy(vec, 1, [3])

    assert vec.tolist() == [1, 3, 2]


def test_integer_extremes_survive_the_kernel(vec_factory):
    low, high = -(2 ** 63), 2 ** 63 - 1
    vec = vec_factory("i64", [0])

    splice_copy(vec, 0, [low, high])

    assert vec.tolist() == [low, high, 0]

    unsigned = vec_factory("u64", [1])
    splice_copy(unsigned, 1, [2 ** 64 - 1])
    assert unsigned.tolist() == [1, 2 ** 64 - 1]


def test_float_values(vec_factory):
    vec = vec_factory("f64", [1.5, 4.5])

    splice_clone(vec, 1, [2.5, 3.5])

    assert vec.tolist() == [1.5, 2.5, 3.5, 4.5]


def test_copy_prepend(vec_factory):
    vec = vec_factory("i32", [1, 2, 3])

    splice_copy(vec, 0, vec_factory("i32", [9, 9]))

    assert vec.tolist() == [9, 9, 1, 2, 3]


def test_copy_leaves_source_untouched(vec_factory):
    vec = vec_factory("u16", [1, 4])
    src = vec_factory("u16", [2, 3])

    splice_copy(vec, 1, src)

    assert vec.tolist() == [1, 2, 3, 4]
    assert src.tolist() == [2, 3]


def test_copy_of_a_vec_into_itself(vec_factory):
    vec = vec_factory("i16", [1, 2])

    splice_copy(vec, 1, vec)

    assert vec.tolist() == [1, 1, 2, 2]


def test_copy_rejects_other_kinds(vec_factory):
    vec = vec_factory("i32", [1])

    with pytest.raises(ElementKindMismatch):
        splice_copy(vec, 0, vec_factory("i64", [2]))

    assert vec.tolist() == [1]


def test_copy_failure_leaves_vec_untouched(vec_factory):
    vec = vec_factory("u8", [1, 2])

    with pytest.raises(ElementOutOfRange):
        splice_copy(vec, 1, [3, 300])

    assert vec.tolist() == [1, 2]
    assert vec.capacity == 2


def test_out_of_bounds_splice_does_not_grow(vec_factory):
    vec = vec_factory("i32", [1, 2])

    with pytest.raises(IndexOutOfBounds):
        splice_copy(vec, 3, [9])

    assert vec.tolist() == [1, 2]
    assert vec.capacity == 2


def test_empty_source_does_not_reallocate(vec_factory):
    vec = vec_factory("i32", [1, 2])
    data = vec.header.data

    splice_copy(vec, 2, [])

    assert vec.tolist() == [1, 2]
    assert vec.header.data == data


def test_growth_doubles_capacity(vec_factory):
    vec = vec_factory("i32", [1, 2, 3, 4])

    splice_copy(vec, 2, [5])

    assert vec.capacity == 8
    assert vec.tolist() == [1, 2, 5, 3, 4]


def test_growth_covers_large_inserts(vec_factory):
    vec = vec_factory("i32", [1])

    splice_copy(vec, 1, list(range(10)))

    assert vec.capacity == 11
    assert len(vec) == 11


def test_move_drains_source_and_keeps_its_capacity(vec_factory):
    dest = vec_factory("u8", [1])
    src = vec_factory("u8", [2, 3])

    splice(dest, 1, src)

    assert dest.tolist() == [1, 2, 3]
    assert len(src) == 0
    assert src.capacity == 2

    src.append(5)
    assert src.tolist() == [5]


def test_move_into_itself_is_rejected(vec_factory):
    vec = vec_factory("i32", [1])

    with pytest.raises(AliasedSource):
        splice(vec, 0, vec)


def test_move_requires_same_kind(vec_factory):
    dest = vec_factory("i32", [1])
    src = vec_factory("u32", [2])

    with pytest.raises(ElementKindMismatch):
        splice(dest, 0, src)

    assert src.tolist() == [2]


def test_move_requires_a_vec_source(vec_factory):
    with pytest.raises(ContainerMismatch):
        splice(vec_factory("i32"), 0, [1])


def test_insert_clamps_like_list(vec_factory):
    vec = vec_factory("i32", [2])

    vec.insert(100, 3)
    vec.insert(-100, 1)
    vec.insert(-1, 9)

    assert vec.tolist() == [1, 2, 9, 3]


def test_append_extend_and_pop(vec_factory):
    vec = vec_factory("i64")

    vec.append(1)
    vec.extend([2, 3])
    vec.extend(vec)

    assert vec.tolist() == [1, 2, 3, 1, 2, 3]
    assert vec.pop() == 3
    assert vec.pop(0) == 1
    assert vec.tolist() == [2, 3, 1, 2]


def test_delete_by_index_and_slice(vec_factory):
    vec = vec_factory("i32", range(8))

    del vec[0]
    del vec[2:4]
    del vec[::2]

    assert vec.tolist() == [2, 6]


def test_item_assignment_and_slicing(vec_factory):
    vec = vec_factory("f32", [0.5, 1.5, 2.5])

    vec[1] = 3
    part = vec[1:]

    assert isinstance(part, RawVec)
    assert part.kind.name == "f32"
    assert part.tolist() == [3.0, 2.5]
    with pytest.raises(IndexError):
        vec[3]
    with pytest.raises(TypeError):
        vec[0:1] = [1.0]


def test_clear_keeps_capacity(vec_factory):
    vec = vec_factory("i32", [1, 2, 3])

    vec.clear()

    assert len(vec) == 0
    assert vec.capacity == 3


def test_from_array_matches_typecode():
    source = array.array("h", [1, -2, 3])

    vec = RawVec.from_array(source)

    assert vec.kind.name == "i16"
    assert vec.tolist() == [1, -2, 3]


def test_equality_and_repr(vec_factory):
    vec = vec_factory("u8", [1, 2])

    assert vec == vec_factory("u8", [1, 2])
    assert vec != vec_factory("i8", [1, 2])
    assert vec == (1, 2)
    assert vec != "12"
    assert repr(vec) == "RawVec('u8', [1, 2])"
