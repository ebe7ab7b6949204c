"""Generated LLVM IR for the splice kernels."""
import llvmlite.binding as llvm
import pytest
from llvmlite import ir

from vecsplice.backend.elements import ALL_KINDS, F64, I32
from vecsplice.backend.splice_ir import emit_splice_function, generate_module_ir, kernel_name


def test_module_has_copy_and_move_kernel_per_kind():
    module = generate_module_ir()
    names = {fn.name for fn in module.functions}

    for kind in ALL_KINDS:
        assert kernel_name(kind, move=False) in names
        assert kernel_name(kind, move=True) in names


def test_kernel_names():
    assert kernel_name(I32, move=False) == "vecsplice_copy_i32"
    assert kernel_name(F64, move=True) == "vecsplice_move_f64"


def test_kernels_use_bulk_memory_intrinsics():
    text = str(generate_module_ir([I32]))

    assert "llvm.memmove" in text
    assert "llvm.memcpy" in text


def test_kernel_signature():
    module = ir.Module(name="kernels")
    func = emit_splice_function(module, I32, move=False)

    assert [arg.name for arg in func.args] == ["dest", "index", "src"]
    assert str(func.ftype.return_type) == "i32"
    assert func.ftype.args[1] == ir.IntType(64)


def test_only_move_kernel_stores_into_source_length():
    module = ir.Module(name="kernels")
    copy_fn = emit_splice_function(module, I32, move=False)
    move_fn = emit_splice_function(module, I32, move=True)

    assert str(move_fn).count("store") == str(copy_fn).count("store") + 1


@pytest.mark.parametrize("kinds", [[I32], list(ALL_KINDS)], ids=["single", "all"])
def test_module_parses_and_verifies(kinds):
    llmod = llvm.parse_assembly(str(generate_module_ir(kinds)))
    llmod.verify()

    defined = [fn.name for fn in llmod.functions if not fn.is_declaration]
    assert len(defined) == 2 * len(kinds)
