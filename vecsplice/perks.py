"""
Capability checks for splice sources and destinations.

Python has no compile-time bounds on element types, so the three splice
flavours check their requirements here, before anything is mutated:

- Clone: any value, duplicated with a clone function.
- Copy: plain data only, i.e. immutable atoms whose duplicate is the value
  itself, or typed buffers whose elements are raw bytes.
- Move: source and destination are the same concrete container.
"""
from __future__ import annotations

import array
from collections.abc import Sized

from vecsplice.internals.errors import (
    ContainerMismatch,
    ElementKindMismatch,
    NotPlainData,
    SourceNotSized,
)
from vecsplice.rawvec import RawVec


PLAIN_DATA_TYPES = (bool, int, float, complex, str, bytes, type(None))

# Containers whose elements are plain data by construction
TYPED_BUFFERS = (RawVec, array.array, bytearray)


def is_plain_data(value) -> bool:
    return isinstance(value, PLAIN_DATA_TYPES)


def is_typed_buffer(container) -> bool:
    return isinstance(container, TYPED_BUFFERS)


def require_sized(source) -> None:
    if not isinstance(source, Sized):
        raise SourceNotSized(type=type(source).__name__)


def require_plain_data(source) -> None:
    """Reject sources holding values that a bitwise copy would alias."""
    if is_typed_buffer(source) or isinstance(source, (bytes, memoryview)):
        return
    for value in source:
        if not is_plain_data(value):
            raise NotPlainData(value=value, type=type(value).__name__)


def require_same_container(dest, source) -> None:
    """Check that source can be drained into dest element by element."""
    if type(source) is not type(dest):
        raise ContainerMismatch(src=type(source).__name__, dest=type(dest).__name__)
    if isinstance(dest, RawVec) and source.kind != dest.kind:
        raise ElementKindMismatch(src=source.kind.name, dest=dest.kind.name)
    if isinstance(dest, array.array) and source.typecode != dest.typecode:
        raise ElementKindMismatch(src=source.typecode, dest=dest.typecode)
