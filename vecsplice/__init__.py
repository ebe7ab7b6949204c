"""vecsplice - insert a whole sequence into the middle of a contiguous container."""
from importlib.metadata import version, PackageNotFoundError

from vecsplice.backend.elements import ALL_KINDS, ElementKind
from vecsplice.backend.engine import SpliceEngine, get_engine
from vecsplice.config import EngineConfig
from vecsplice.internals.errors import (
    AliasedSource,
    ContainerMismatch,
    ElementKindMismatch,
    ElementOutOfRange,
    IndexOutOfBounds,
    NotPlainData,
    SourceNotSized,
    SpliceError,
    UnknownElementKind,
)
from vecsplice.ops import splice, splice_clone, splice_copy
from vecsplice.rawvec import RawVec

try:
    __version__ = version("vecsplice")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except OSError:
        __version__ = "unknown"
    __dev__ = True

__all__ = [
    "ALL_KINDS",
    "AliasedSource",
    "ContainerMismatch",
    "ElementKind",
    "ElementKindMismatch",
    "ElementOutOfRange",
    "EngineConfig",
    "IndexOutOfBounds",
    "NotPlainData",
    "RawVec",
    "SourceNotSized",
    "SpliceEngine",
    "SpliceError",
    "UnknownElementKind",
    "get_engine",
    "splice",
    "splice_clone",
    "splice_copy",
]
