"""
Splice kernel generation for RawVec.

Generates, for every plain-data element kind:
    vecsplice_copy_{kind}(Vec* dest, i64 index, Vec* src) -> i32
    vecsplice_move_{kind}(Vec* dest, i64 index, Vec* src) -> i32

Both flavours share one emitter. The move flavour additionally drains the
source by storing 0 into its length; the element bytes themselves are
transferred the same way, since plain data has no ownership to hand over.

The kernel never allocates: the caller reserves room for len(dest) + len(src)
elements first. The returned status tag mirrors a Result:
    0 -> Ok
    1 -> index out of bounds
    2 -> destination capacity too small
"""
from __future__ import annotations

from typing import Iterable

from llvmlite import ir

from vecsplice.backend.elements import ALL_KINDS, ElementKind
from vecsplice.backend.vec_types import (
    I32,
    I64,
    I8_PTR,
    get_vec_capacity_ptr,
    get_vec_data_ptr,
    get_vec_len_ptr,
    get_vec_ptr_type,
)


STATUS_OK = 0
STATUS_OUT_OF_BOUNDS = 1
STATUS_NO_CAPACITY = 2

FALSE_I1 = ir.Constant(ir.IntType(1), 0)


def kernel_name(kind: ElementKind, move: bool) -> str:
    flavour = "move" if move else "copy"
    return f"vecsplice_{flavour}_{kind.name}"


def emit_splice_function(module: ir.Module, kind: ElementKind, move: bool) -> ir.Function:
    """Emit LLVM IR for one splice kernel.

    Algorithm:
    1. Bounds check: index must be in range [0, len] (inclusive of len for append)
    2. Capacity check: len + src.len must fit the reserved capacity
    3. Shift elements from [index, len) src.len positions right using memmove
    4. Copy src.data[0..src.len) into the gap using memcpy
    5. Move flavour only: set src.len to 0
    6. Set dest.len to len + src.len

    Args:
        module: Module receiving the function.
        kind: Element kind of both vectors.
        move: Whether to drain the source after the copy.

    Returns:
        The generated function.
    """
    vec_ptr_type = get_vec_ptr_type()
    func_type = ir.FunctionType(I32, [vec_ptr_type, I64, vec_ptr_type])
    func = ir.Function(module, func_type, name=kernel_name(kind, move))

    dest_param, index_param, src_param = func.args
    dest_param.name = "dest"
    index_param.name = "index"
    src_param.name = "src"

    entry = func.append_basic_block("entry")
    builder = ir.IRBuilder(entry)

    # Get pointers to fields
    dest_len_ptr = get_vec_len_ptr(builder, dest_param)
    dest_cap_ptr = get_vec_capacity_ptr(builder, dest_param)
    dest_data_ptr_ptr = get_vec_data_ptr(builder, dest_param)
    src_len_ptr = get_vec_len_ptr(builder, src_param)
    src_data_ptr_ptr = get_vec_data_ptr(builder, src_param)

    # Load current values
    current_len = builder.load(dest_len_ptr, name="current_len")
    current_cap = builder.load(dest_cap_ptr, name="current_cap")
    data_ptr = builder.load(dest_data_ptr_ptr, name="data_ptr")
    src_len = builder.load(src_len_ptr, name="src_len")
    src_data_ptr = builder.load(src_data_ptr_ptr, name="src_data_ptr")

    # Bounds check: 0 <= index <= len
    zero = ir.Constant(I64, 0)
    index_not_negative = builder.icmp_signed(">=", index_param, zero)
    index_valid = builder.icmp_signed("<=", index_param, current_len)
    bounds_ok = builder.and_(index_not_negative, index_valid, name="bounds_ok")

    capacity_block = func.append_basic_block("splice_check_capacity")
    out_of_bounds_block = func.append_basic_block("splice_out_of_bounds")
    builder.cbranch(bounds_ok, capacity_block, out_of_bounds_block)

    builder.position_at_end(out_of_bounds_block)
    builder.ret(ir.Constant(I32, STATUS_OUT_OF_BOUNDS))

    # Capacity check: caller must have reserved len + src.len slots
    builder.position_at_end(capacity_block)
    new_len = builder.add(current_len, src_len, name="new_len")
    has_room = builder.icmp_signed("<=", new_len, current_cap, name="has_room")

    shift_block = func.append_basic_block("splice_shift")
    no_capacity_block = func.append_basic_block("splice_no_capacity")
    builder.cbranch(has_room, shift_block, no_capacity_block)

    builder.position_at_end(no_capacity_block)
    builder.ret(ir.Constant(I32, STATUS_NO_CAPACITY))

    builder.position_at_end(shift_block)
    element_size = ir.Constant(I64, kind.size)
    gap_offset = builder.mul(index_param, element_size, name="gap_offset")
    gap_ptr = builder.gep(data_ptr, [gap_offset], name="gap_ptr")

    # Shift the tail [index, len) right by src.len elements
    num_to_move = builder.sub(current_len, index_param, name="num_to_move")
    has_tail = builder.icmp_signed(">", num_to_move, zero, name="has_tail")

    with builder.if_then(has_tail):
        shifted_index = builder.add(index_param, src_len, name="shifted_index")
        shifted_offset = builder.mul(shifted_index, element_size, name="shifted_offset")
        shifted_ptr = builder.gep(data_ptr, [shifted_offset], name="shifted_ptr")
        bytes_to_move = builder.mul(num_to_move, element_size, name="bytes_to_move")

        # Regions overlap whenever the tail is longer than src.len
        memmove_fn = module.declare_intrinsic('llvm.memmove', [I8_PTR, I8_PTR, I64])
        builder.call(memmove_fn, [shifted_ptr, gap_ptr, bytes_to_move, FALSE_I1])

    # Fill the gap with the source elements, in order
    has_items = builder.icmp_signed(">", src_len, zero, name="has_items")

    with builder.if_then(has_items):
        bytes_to_copy = builder.mul(src_len, element_size, name="bytes_to_copy")
        memcpy_fn = module.declare_intrinsic('llvm.memcpy', [I8_PTR, I8_PTR, I64])
        builder.call(memcpy_fn, [gap_ptr, src_data_ptr, bytes_to_copy, FALSE_I1])

    if move:
        builder.store(zero, src_len_ptr)

    builder.store(new_len, dest_len_ptr)
    builder.ret(ir.Constant(I32, STATUS_OK))

    return func


def generate_splice_functions(module: ir.Module, kinds: Iterable[ElementKind] = ALL_KINDS) -> None:
    """Generate copy and move kernels for every given kind."""
    for kind in kinds:
        emit_splice_function(module, kind, move=False)
        emit_splice_function(module, kind, move=True)


def generate_module_ir(kinds: Iterable[ElementKind] = ALL_KINDS) -> ir.Module:
    """Generate LLVM IR module for the splice kernels."""
    module = ir.Module(name="vecsplice")
    generate_splice_functions(module, kinds)
    return module
