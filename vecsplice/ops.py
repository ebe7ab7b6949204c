"""
Splice operations: insert a whole sequence into the middle of a container.

Implemented operations:
- splice_clone(dest, index, src): insert clones of src's elements
- splice_copy(dest, index, src): insert a bulk copy of plain-data elements
- splice(dest, index, src): move src's elements into dest, leaving src empty

All three follow the same skeleton:
1. Validate index (0 <= index <= len(dest)) and the source, before any mutation
2. Grow dest by len(src) slots
3. Shift dest[index:] right by len(src) in one bulk move
4. Fill the gap with src's elements, in order
5. (splice only) Empty src

For list, array.array and bytearray, steps 2-4 are one slice assignment.
For RawVec they run in a native kernel.
"""
from __future__ import annotations

import array
import copy
import operator
from typing import Any, Callable

from vecsplice.backend.elements import U8, kind_for_typecode
from vecsplice.internals.errors import AliasedSource, ElementKindMismatch, IndexOutOfBounds
from vecsplice.perks import (
    is_typed_buffer,
    require_plain_data,
    require_same_container,
    require_sized,
)
from vecsplice.rawvec import RawVec


def _check_index(dest, index) -> int:
    position = operator.index(index)
    if not 0 <= position <= len(dest):
        raise IndexOutOfBounds(index=position, length=len(dest))
    return position


def splice_clone(dest, index: int, src, clone: Callable[[Any], Any] = copy.deepcopy) -> None:
    """Clone the contents of src into dest at index, shifting later elements right.

    Every clone is made before dest is touched, so a failing clone leaves dest
    as it was. Typed buffers hold plain data, where cloning and copying are
    the same thing, so they take the splice_copy path and `clone` is not
    called for them.

    Raises:
        IndexOutOfBounds: If index is outside [0, len(dest)].
        SourceNotSized: If src has no known length.
    """
    if is_typed_buffer(dest):
        splice_copy(dest, index, src)
        return

    position = _check_index(dest, index)
    require_sized(src)

    clones = [clone(value) for value in src]
    dest[position:position] = clones


def splice_copy(dest, index: int, src) -> None:
    """Copy the plain-data contents of src into dest at index.

    src is staged into dest's representation first (a snapshot when src is
    dest), so every conversion error surfaces before dest is mutated.

    Raises:
        IndexOutOfBounds: If index is outside [0, len(dest)].
        SourceNotSized: If src has no known length.
        NotPlainData: If an element cannot be bitwise-copied into dest.
        ElementKindMismatch: If src is a RawVec of another kind.
        ElementOutOfRange: If an integer does not fit dest's element kind.
    """
    position = _check_index(dest, index)
    require_sized(src)

    if isinstance(dest, RawVec):
        dest.splice_from(position, _stage_rawvec(dest, src))
    elif isinstance(dest, array.array):
        dest[position:position] = _stage_array(dest, src)
    elif isinstance(dest, bytearray):
        dest[position:position] = _stage_bytes(src)
    else:
        require_plain_data(src)
        dest[position:position] = list(src)


def splice(dest, index: int, src) -> None:
    """Move the contents of src into dest at index, leaving src empty.

    src must be the same kind of container as dest and must not be dest.

    Raises:
        IndexOutOfBounds: If index is outside [0, len(dest)].
        AliasedSource: If src is dest.
        ContainerMismatch: If src's type differs from dest's.
        ElementKindMismatch: If typed buffers disagree on element kind.
    """
    position = _check_index(dest, index)
    if src is dest:
        raise AliasedSource()
    require_same_container(dest, src)

    if isinstance(dest, RawVec):
        dest.splice_from(position, src, move=True)
        return

    # Drain first: an exported buffer on src must fail before dest changes.
    moved = src[:]
    del src[:]
    try:
        dest[position:position] = moved
    except Exception:
        src[:] = moved
        raise


#
# --- Staging helpers
#

def _stage_rawvec(dest: RawVec, src) -> RawVec:
    if isinstance(src, RawVec):
        if src.kind != dest.kind:
            raise ElementKindMismatch(src=src.kind.name, dest=dest.kind.name)
        return src.copy() if src is dest else src
    return RawVec(dest.kind, src, engine=dest.engine)


def _stage_array(dest: array.array, src) -> array.array:
    if isinstance(src, array.array) and src.typecode == dest.typecode:
        return array.array(src.typecode, src) if src is dest else src
    kind = kind_for_typecode(dest.typecode)
    return array.array(dest.typecode, [kind.coerce(value) for value in src])


def _stage_bytes(src) -> bytes:
    if isinstance(src, (bytes, bytearray)):
        return bytes(src)
    return bytes(U8.coerce(value) for value in src)
