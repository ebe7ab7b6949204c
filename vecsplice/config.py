"""Native engine settings, with environment overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from vecsplice.internals.errors import raise_internal_error


OPT_LEVELS = ("none", "mem2reg", "o1", "o2")
DEFAULT_OPT = "mem2reg"

_FALSE_WORDS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """How the splice kernels are compiled.

    Attributes:
        opt: Optimization level - "none", "mem2reg", "o1" or "o2".
        verify: Run the LLVM verifier on the generated module.
        triple: Target triple, or None for the running process.
    """

    opt: str = DEFAULT_OPT
    verify: bool = True
    triple: Optional[str] = None

    def __post_init__(self):
        level = (self.opt or "none").lower()
        if level not in OPT_LEVELS:
            raise_internal_error("CE0003", name="opt", value=self.opt,
                                 expected=", ".join(OPT_LEVELS))
        object.__setattr__(self, "opt", level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from VECSPLICE_OPT, VECSPLICE_VERIFY and VECSPLICE_TRIPLE."""
        env = os.environ if environ is None else environ
        verify = env.get("VECSPLICE_VERIFY", "1").strip().lower() not in _FALSE_WORDS
        return cls(
            opt=env.get("VECSPLICE_OPT", DEFAULT_OPT),
            verify=verify,
            triple=env.get("VECSPLICE_TRIPLE") or None,
        )
