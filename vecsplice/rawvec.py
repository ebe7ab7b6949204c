"""
RawVec: a contiguous, growable buffer of plain-data elements.

The buffer is described by a Vec header (len, capacity, data pointer) that
the native splice kernels read and update directly. Storage is a ctypes
array owned by the RawVec; growth allocates a new array and copies the live
prefix across, doubling the capacity each time.
"""
from __future__ import annotations

import array
import ctypes
from collections.abc import MutableSequence, Sequence
from typing import Iterable, Optional, Union

from vecsplice.backend.elements import ElementKind, kind_for_typecode, resolve_kind
from vecsplice.backend.engine import SpliceEngine, get_engine
from vecsplice.backend.vec_types import VecHeader


class RawVec(MutableSequence):
    """Growable contiguous vector of one plain-data element kind."""

    def __init__(self, kind: Union[str, ElementKind], items: Iterable = (),
                 capacity: int = 0, engine: Optional[SpliceEngine] = None) -> None:
        self.kind = resolve_kind(kind)
        self._engine = engine
        self._header = VecHeader(0, 0, None)
        self._buffer = None

        values = [self.kind.coerce(item) for item in items]
        self.reserve(max(capacity, len(values)))
        for position, value in enumerate(values):
            self._buffer[position] = value
        self._header.len = len(values)

    @classmethod
    def from_array(cls, source: array.array, engine: Optional[SpliceEngine] = None) -> "RawVec":
        """Build a vector with the element kind matching source's typecode."""
        vec = cls(kind_for_typecode(source.typecode), capacity=len(source), engine=engine)
        if len(source):
            address, _ = source.buffer_info()
            ctypes.memmove(vec._header.data, address, len(source) * vec.kind.size)
            vec._header.len = len(source)
        return vec

    # --- Header access

    @property
    def engine(self) -> SpliceEngine:
        return self._engine or get_engine()

    @property
    def header(self) -> VecHeader:
        return self._header

    @property
    def capacity(self) -> int:
        return self._header.capacity

    def __len__(self) -> int:
        return self._header.len

    # --- Capacity management

    def reserve(self, additional: int) -> None:
        """Ensure capacity for at least `additional` more elements.

        Uses 2x growth, bumped to the required length when doubling is not
        enough. Existing elements keep their order.
        """
        required = len(self) + additional
        if required <= self.capacity:
            return

        new_cap = max(required, self.capacity * 2, 1)
        new_buffer = (self.kind.ctype * new_cap)()
        if len(self):
            ctypes.memmove(new_buffer, self._header.data, len(self) * self.kind.size)

        self._buffer = new_buffer
        self._header.data = ctypes.addressof(new_buffer)
        self._header.capacity = new_cap

    def clear(self) -> None:
        """Remove all elements, keeping the allocated capacity."""
        self._header.len = 0

    # --- Element access

    def _normalize(self, index: int) -> int:
        position = index.__index__()
        if position < 0:
            position += len(self)
        if not 0 <= position < len(self):
            raise IndexError("RawVec index out of range")
        return position

    def __getitem__(self, index):
        if isinstance(index, slice):
            return RawVec(self.kind, [self._buffer[i] for i in range(*index.indices(len(self)))],
                          engine=self._engine)
        return self._buffer[self._normalize(index)]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            raise TypeError("RawVec does not support slice assignment; use vecsplice.splice_copy")
        self._buffer[self._normalize(index)] = self.kind.coerce(value)

    def __delitem__(self, index) -> None:
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            if step != 1:
                doomed = set(range(start, stop, step))
                keep = [value for position, value in enumerate(self) if position not in doomed]
                for position, value in enumerate(keep):
                    self._buffer[position] = value
                self._header.len = len(keep)
                return
            count = max(0, stop - start)
        else:
            start = self._normalize(index)
            count = 1

        if count == 0:
            return
        size = self.kind.size
        tail = len(self) - start - count
        if tail:
            ctypes.memmove(self._header.data + start * size,
                           self._header.data + (start + count) * size,
                           tail * size)
        self._header.len = len(self) - count

    def __iter__(self):
        for position in range(len(self)):
            yield self._buffer[position]

    # --- Growth

    def splice_from(self, index: int, source: "RawVec", move: bool = False) -> None:
        """Insert source's elements at index through the native kernel.

        The caller is responsible for validating index, source kind and
        aliasing; this only reserves room and runs the kernel.
        """
        if not len(source):
            return
        self.reserve(len(source))
        self.engine.run(self.kind, self._header, index, source.header, move=move)

    def insert(self, index: int, value) -> None:
        """Insert value before index, clamping index like list.insert."""
        position = index.__index__()
        if position < 0:
            position = max(0, position + len(self))
        position = min(position, len(self))
        self.splice_from(position, RawVec(self.kind, [value]))

    def append(self, value) -> None:
        value = self.kind.coerce(value)
        self.reserve(1)
        self._buffer[len(self)] = value
        self._header.len = len(self) + 1

    def extend(self, values: Iterable) -> None:
        if values is self:
            values = self.copy()
        elif not isinstance(values, RawVec) or values.kind != self.kind:
            values = RawVec(self.kind, values)
        self.splice_from(len(self), values)

    # --- Conversion

    def copy(self) -> "RawVec":
        return RawVec(self.kind, self, engine=self._engine)

    def tolist(self) -> list:
        return list(self)

    def __eq__(self, other) -> bool:
        if isinstance(other, RawVec):
            return self.kind == other.kind and self.tolist() == other.tolist()
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes)):
            return self.tolist() == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"RawVec({self.kind.name!r}, {self.tolist()!r})"
