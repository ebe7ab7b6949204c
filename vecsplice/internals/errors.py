# vecsplice/internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Category(str, Enum):
    INDEX     = "index"
    TYPE      = "type"
    OWNERSHIP = "ownership"
    VALUE     = "value"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    text: str
    category: Category = Category.TYPE
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


class SpliceError(Exception):
    """Base class for every error raised by a splice operation.

    Subclasses pin a catalog code; the message text is rendered from the
    registry entry with the keyword arguments given to the constructor,
    which are also kept as attributes for callers that want the details.
    """

    code: str = ""

    def __init__(self, **kwargs) -> None:
        self.details = kwargs
        for key, value in kwargs.items():
            setattr(self, key, value)
        super().__init__(f"{self.code}: {format_message(self.code, **kwargs)}")

    def __reduce__(self):
        return _rebuild_error, (type(self), self.details)

    @property
    def message(self) -> ErrorMessage:
        return _get(self.code)


class IndexOutOfBounds(SpliceError, IndexError):
    code = "SP0001"


class NotPlainData(SpliceError, TypeError):
    code = "SP0002"


class AliasedSource(SpliceError, ValueError):
    code = "SP0003"


class ContainerMismatch(SpliceError, TypeError):
    code = "SP0004"


class ElementKindMismatch(SpliceError, TypeError):
    code = "SP0005"


class ElementOutOfRange(SpliceError, OverflowError):
    code = "SP0006"


class SourceNotSized(SpliceError, TypeError):
    code = "SP0007"


class UnknownElementKind(SpliceError, ValueError):
    code = "SP0008"


def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for internal errors.

    Internal errors (CE codes) indicate a bug in vecsplice itself or a broken
    native toolchain, never a bad argument from the caller.

    Args:
        code: Error code (e.g., "CE0001")
        **kwargs: Format parameters for the error message

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = format_message(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


def format_message(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _rebuild_error(cls, details):
    return cls(**details)

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

#
# --- Registry population
#

# Caller errors - SP0xxx range
_add(ErrorMessage("SP0001",
    "splice index {index} out of bounds for length {length}",
    Category.INDEX, "The insertion index must lie in [0, len(dest)]; len(dest) appends."))

_add(ErrorMessage("SP0002",
    "element {value!r} of type '{type}' is not plain data",
    Category.TYPE, "splice_copy only accepts immutable atoms; use splice_clone for other values."))

_add(ErrorMessage("SP0003",
    "cannot move a container into itself",
    Category.OWNERSHIP, "splice() drains its source, so source and destination must be distinct."))

_add(ErrorMessage("SP0004",
    "cannot move elements of '{src}' into '{dest}'",
    Category.OWNERSHIP, "splice() requires the source to be the same container type as the destination."))

_add(ErrorMessage("SP0005",
    "cannot splice '{src}' elements into a '{dest}' container",
    Category.TYPE, "Typed buffers only accept sources with the same element kind."))

_add(ErrorMessage("SP0006",
    "value {value!r} out of range for element kind '{kind}'",
    Category.VALUE, "Integer elements must fit the kind's bit width and signedness."))

_add(ErrorMessage("SP0007",
    "source of type '{type}' has no known length",
    Category.TYPE, "Sources must be finite sized sequences; materialise iterators first."))

_add(ErrorMessage("SP0008",
    "unknown element kind '{name}'",
    Category.VALUE, "Element kinds are i8, i16, i32, i64, u8, u16, u32, u64, f32 and f64."))

# Internal errors - CE0xxx range
_add(ErrorMessage("CE0001",
    "native kernel '{name}' returned status {status}",
    Category.INTERNAL, "A kernel rejected a splice that passed Python-side validation."))

_add(ErrorMessage("CE0002",
    "LLVM IR verification failed: {message}",
    Category.INTERNAL, "Generated splice module is malformed."))

_add(ErrorMessage("CE0003",
    "invalid engine setting {name}={value!r} (expected one of: {expected})",
    Category.INTERNAL, "Engine configuration value not recognised."))

_add(ErrorMessage("CE0004",
    "no kernel named '{name}' in compiled module",
    Category.INTERNAL, "The JIT engine could not resolve a generated function."))
