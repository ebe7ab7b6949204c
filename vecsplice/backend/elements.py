"""
Plain-data element kinds for RawVec and the native splice kernels.

Each kind ties together the three views of one element type:
- the LLVM type the kernels are generated for
- the ctypes type backing RawVec storage
- the array.array typecode with the same layout, where one exists

Only plain data lives here: values that can be duplicated with a raw byte
copy and carry no ownership of their own.
"""
from __future__ import annotations

import array
import ctypes
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from llvmlite import ir

from vecsplice.internals.errors import ElementOutOfRange, NotPlainData, UnknownElementKind


@dataclass(frozen=True)
class ElementKind:
    name: str
    llvm_type: ir.Type
    ctype: type
    signed: bool = True
    is_float: bool = False

    @property
    def size(self) -> int:
        return ctypes.sizeof(self.ctype)

    @property
    def bits(self) -> int:
        return self.size * 8

    @property
    def bounds(self) -> Tuple[int, int]:
        """Inclusive (low, high) range of an integer kind."""
        if self.signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1

    @property
    def typecode(self) -> Optional[str]:
        return _TYPECODES.get(self.name)

    def coerce(self, value):
        """Convert a Python value into this kind, rejecting lossy input."""
        if self.is_float:
            if isinstance(value, (int, float)):
                return float(value)
            raise NotPlainData(value=value, type=type(value).__name__)

        if isinstance(value, float) or not hasattr(value, "__index__"):
            raise NotPlainData(value=value, type=type(value).__name__)
        number = value.__index__()
        low, high = self.bounds
        if not low <= number <= high:
            raise ElementOutOfRange(value=number, kind=self.name)
        return number

    def __str__(self) -> str:
        return self.name


# Signed integer kinds
I8 = ElementKind("i8", ir.IntType(8), ctypes.c_int8)
I16 = ElementKind("i16", ir.IntType(16), ctypes.c_int16)
I32 = ElementKind("i32", ir.IntType(32), ctypes.c_int32)
I64 = ElementKind("i64", ir.IntType(64), ctypes.c_int64)

# Unsigned integer kinds (LLVM integers carry no sign)
U8 = ElementKind("u8", ir.IntType(8), ctypes.c_uint8, signed=False)
U16 = ElementKind("u16", ir.IntType(16), ctypes.c_uint16, signed=False)
U32 = ElementKind("u32", ir.IntType(32), ctypes.c_uint32, signed=False)
U64 = ElementKind("u64", ir.IntType(64), ctypes.c_uint64, signed=False)

# Float kinds
F32 = ElementKind("f32", ir.FloatType(), ctypes.c_float, is_float=True)
F64 = ElementKind("f64", ir.DoubleType(), ctypes.c_double, is_float=True)

ALL_KINDS: Tuple[ElementKind, ...] = (I8, I16, I32, I64, U8, U16, U32, U64, F32, F64)

KINDS_BY_NAME: Dict[str, ElementKind] = {kind.name: kind for kind in ALL_KINDS}


def _typecode_table() -> Dict[str, str]:
    """Map kind names to array.array typecodes of matching width and sign.

    Integer typecode widths are platform dependent, so the table is built
    from the running interpreter instead of being hard-coded.
    """
    table: Dict[str, str] = {}
    for code in "bBhHiIlLqQ":
        itemsize = array.array(code).itemsize
        name = f"{'i' if code.islower() else 'u'}{itemsize * 8}"
        table.setdefault(name, code)
    table["f32"] = "f"
    table["f64"] = "d"
    return table


_TYPECODES = _typecode_table()


def resolve_kind(kind: Union[str, ElementKind]) -> ElementKind:
    """Look up an element kind by name, passing ElementKind values through."""
    if isinstance(kind, ElementKind):
        return kind
    try:
        return KINDS_BY_NAME[kind]
    except (KeyError, TypeError):
        raise UnknownElementKind(name=kind) from None


def kind_for_typecode(typecode: str) -> ElementKind:
    """Find the element kind with the same layout as an array.array typecode."""
    for name, code in _TYPECODES.items():
        if code == typecode:
            return KINDS_BY_NAME[name]
    if typecode and typecode in "bhilqBHILQ":
        prefix = "i" if typecode.islower() else "u"
        return resolve_kind(f"{prefix}{array.array(typecode).itemsize * 8}")
    raise UnknownElementKind(name=typecode)
