"""
Remote memory introspection for nowplaying.

Everything here is read-only and built on a single primitive,
MemorySource.read(address, size).
"""

from .errors import (
    AccessDeniedError,
    EmptyRead,
    FieldError,
    InvalidAddress,
    MemoryAccessError,
    ModuleNotFoundInProcessError,
    NullPointer,
    ProcessError,
    ProcessNotFoundError,
    ReadFault,
)
from .fields import FieldExtractor, FieldKind, FieldPolicy, FieldResult, FieldSpec
from .process import MemorySource, ProcessAttacher, find_process
from .reader import SampleResult, SongSampler
from .resolver import AddressResolver
from .strings import StringDecoder

__all__ = [
    "AccessDeniedError",
    "AddressResolver",
    "EmptyRead",
    "FieldError",
    "FieldExtractor",
    "FieldKind",
    "FieldPolicy",
    "FieldResult",
    "FieldSpec",
    "InvalidAddress",
    "MemoryAccessError",
    "MemorySource",
    "ModuleNotFoundInProcessError",
    "NullPointer",
    "ProcessAttacher",
    "ProcessError",
    "ProcessNotFoundError",
    "ReadFault",
    "SampleResult",
    "SongSampler",
    "StringDecoder",
    "find_process",
]
