"""
Type helpers for the RawVec header.

Structure (same layout on the ctypes and the LLVM side):
    struct Vec:
        i64 len       # Current number of elements
        i64 capacity  # Allocated capacity, in elements
        i8* data      # Pointer to the element buffer (null while capacity is 0)
"""

import ctypes

import llvmlite.ir as ir


I32 = ir.IntType(32)
I64 = ir.IntType(64)
I8_PTR = ir.PointerType(ir.IntType(8))

# GEP indices into the Vec struct
VEC_LEN_INDICES = [ir.Constant(I32, 0), ir.Constant(I32, 0)]
VEC_CAP_INDICES = [ir.Constant(I32, 0), ir.Constant(I32, 1)]
VEC_DATA_INDICES = [ir.Constant(I32, 0), ir.Constant(I32, 2)]


class VecHeader(ctypes.Structure):
    _fields_ = [
        ("len", ctypes.c_int64),
        ("capacity", ctypes.c_int64),
        ("data", ctypes.c_void_p),
    ]


def get_vec_llvm_type() -> ir.LiteralStructType:
    """Get LLVM struct type for the Vec header."""
    return ir.LiteralStructType([I64, I64, I8_PTR])


def get_vec_ptr_type() -> ir.PointerType:
    return ir.PointerType(get_vec_llvm_type())


def get_vec_len_ptr(builder: ir.IRBuilder, vec_ptr: ir.Value) -> ir.Value:
    return builder.gep(vec_ptr, VEC_LEN_INDICES, inbounds=True, name="vec_len_ptr")


def get_vec_capacity_ptr(builder: ir.IRBuilder, vec_ptr: ir.Value) -> ir.Value:
    return builder.gep(vec_ptr, VEC_CAP_INDICES, inbounds=True, name="vec_cap_ptr")


def get_vec_data_ptr(builder: ir.IRBuilder, vec_ptr: ir.Value) -> ir.Value:
    return builder.gep(vec_ptr, VEC_DATA_INDICES, inbounds=True, name="vec_data_ptr")
