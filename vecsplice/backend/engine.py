"""
JIT engine for the native splice kernels.

This module handles target machine setup, module verification, the
optimization pipeline and MCJIT compilation of the module produced by
splice_ir.generate_module_ir, and hands out ctypes callables per kernel.
"""
from __future__ import annotations

import ctypes
from typing import Any, Dict, Iterable, Optional

from llvmlite import binding as llvm

from vecsplice.backend.elements import ALL_KINDS, ElementKind
from vecsplice.backend.splice_ir import STATUS_OK, generate_module_ir, kernel_name
from vecsplice.backend.vec_types import VecHeader
from vecsplice.config import EngineConfig
from vecsplice.internals.errors import raise_internal_error


KERNEL_SIGNATURE = ctypes.CFUNCTYPE(
    ctypes.c_int32,
    ctypes.POINTER(VecHeader),
    ctypes.c_int64,
    ctypes.POINTER(VecHeader),
)


class SpliceEngine:
    """Compiles the splice kernels once and runs them against Vec headers."""

    def __init__(self, config: Optional[EngineConfig] = None,
                 kinds: Iterable[ElementKind] = ALL_KINDS) -> None:
        self.config = config or EngineConfig()
        self.kinds = tuple(kinds)
        self._llvm_init = False
        self._engine: Optional[llvm.ExecutionEngine] = None
        self._kernels: Dict[str, Any] = {}

    @property
    def compiled(self) -> bool:
        return self._engine is not None

    def ensure_llvm(self) -> None:
        """Initialize LLVM native target and assembly printer.

        Safe to call multiple times.
        """
        if self._llvm_init:
            return
        llvm.initialize_native_target()
        llvm.initialize_native_asmprinter()
        self._llvm_init = True

    def create_target_machine(self) -> llvm.TargetMachine:
        """Create target machine with appropriate relocation model for the platform.

        Linux (ARM64/x86_64) gets the PIC relocation model, everything else
        keeps the default.
        """
        self.ensure_llvm()
        triple = self.config.triple or llvm.get_process_triple()
        target = llvm.Target.from_triple(triple)

        reloc = "default"
        if "linux" in triple.lower():
            reloc = "pic"

        return target.create_target_machine(reloc=reloc)

    def generate_ir(self) -> str:
        """Return the textual LLVM IR of the kernel module."""
        return str(generate_module_ir(self.kinds))

    def compile(self) -> None:
        """Generate, verify, optimize and JIT-compile the kernel module."""
        if self._engine is not None:
            return

        tm = self.create_target_machine()
        module = generate_module_ir(self.kinds)
        module.triple = tm.triple
        module.data_layout = str(tm.target_data)

        llmod = llvm.parse_assembly(str(module))
        if self.config.verify:
            self.verify(llmod, "pre-optimization")

        self.optimize(llmod, tm)
        if self.config.verify:
            self.verify(llmod, "post-optimization")

        engine = llvm.create_mcjit_compiler(llmod, tm)
        engine.finalize_object()
        self._engine = engine

    def kernel(self, kind: ElementKind, move: bool):
        """Get the ctypes callable for one kernel, compiling on first use."""
        name = kernel_name(kind, move)
        fn = self._kernels.get(name)
        if fn is not None:
            return fn

        self.compile()
        address = self._engine.get_function_address(name)
        if not address:
            raise_internal_error("CE0004", name=name)

        fn = KERNEL_SIGNATURE(address)
        self._kernels[name] = fn
        return fn

    def run(self, kind: ElementKind, dest: VecHeader, index: int,
            src: VecHeader, move: bool = False) -> None:
        """Splice src into dest at index. Capacity must already be reserved."""
        fn = self.kernel(kind, move)
        status = fn(ctypes.byref(dest), index, ctypes.byref(src))
        if status != STATUS_OK:
            raise_internal_error("CE0001", name=kernel_name(kind, move), status=status)

    def optimize(self, llmod: llvm.ModuleRef, tm: llvm.TargetMachine) -> None:
        """Apply the configured optimization level to the module.

        Args:
            llmod: The LLVM module to optimize.
            tm: Target machine for optimization context.
        """
        mode = self.config.opt
        if mode == "none":
            return

        if mode == "mem2reg":
            pto = llvm.PipelineTuningOptions(speed_level=0)
            pb = llvm.PassBuilder(tm, pto)
            fpm = llvm.create_new_function_pass_manager()
            fpm.add_sroa_pass()
            for fn in llmod.functions:
                if not fn.is_declaration:
                    fpm.run(fn, pb)
            return

        level = {"o1": 1, "o2": 2}[mode]
        pto = llvm.PipelineTuningOptions(speed_level=level)
        pb = llvm.PassBuilder(tm, pto)

        fpm = llvm.create_new_function_pass_manager()
        mpm = llvm.create_new_module_pass_manager()

        fpm.add_sroa_pass()
        fpm.add_simplify_cfg_pass()
        fpm.add_instruction_combine_pass()
        if level >= 2:
            fpm.add_sccp_pass()
            fpm.add_mem_copy_opt_pass()
            fpm.add_dead_store_elimination_pass()
            fpm.add_simplify_cfg_pass()
        fpm.add_dead_code_elimination_pass()

        mpm.add_strip_dead_prototype_pass()

        for fn in llmod.functions:
            if not fn.is_declaration:
                fpm.run(fn, pb)
        mpm.run(llmod, pb)

    @staticmethod
    def verify(llmod: llvm.ModuleRef, when: str = "unspecified") -> None:
        """Verify the module, raising an internal error on failure.

        Args:
            llmod: The LLVM module to verify.
            when: Description of when verification is happening (for error messages).
        """
        try:
            llmod.verify()
        except RuntimeError as e:
            raise_internal_error("CE0002", message=f"({when}) {e}")


_default_engine: Optional[SpliceEngine] = None


def get_engine() -> SpliceEngine:
    """Process-wide engine, configured from the environment on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = SpliceEngine(EngineConfig.from_env())
    return _default_engine
