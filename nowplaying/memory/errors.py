"""
Exception types for remote memory access.

Two families:
- ProcessError: startup failures (process/module lookup, handle open).
  These are fatal and abort before sampling starts.
- MemoryAccessError: per-read failures while resolving or decoding a field.
  These are recoverable; the sampler defaults the affected field.
"""

from __future__ import annotations


class ProcessError(Exception):
    """Base class for fatal startup failures."""


class ProcessNotFoundError(ProcessError):
    def __init__(self, name: str):
        super().__init__(f"Process '{name}' not found")
        self.name = name


class ModuleNotFoundInProcessError(ProcessError):
    def __init__(self, module_name: str, pid: int):
        super().__init__(f"Module '{module_name}' not found in process with PID {pid}")
        self.module_name = module_name
        self.pid = pid


class AccessDeniedError(ProcessError):
    def __init__(self, pid: int):
        super().__init__(
            f"Failed to open process with PID {pid} (might need administrator privileges)"
        )
        self.pid = pid


class MemoryAccessError(Exception):
    """Base class for recoverable read failures."""

    def __init__(self, message: str, address: int = 0):
        super().__init__(message)
        self.address = address


class ReadFault(MemoryAccessError):
    """A read returned fewer bytes than requested, or faulted."""

    def __init__(self, address: int, index: int | None = None):
        where = f" at pointer chain index {index}" if index is not None else ""
        super().__init__(f"Read failed{where} (0x{address:X})", address)
        self.index = index


class NullPointer(MemoryAccessError):
    """A pointer chain link dereferenced to zero."""

    def __init__(self, address: int, index: int):
        super().__init__(f"Pointer at chain index {index} was null (0x{address:X})", address)
        self.index = index


class InvalidAddress(MemoryAccessError):
    """A resolved address fell outside the sane user-space range."""

    def __init__(self, address: int):
        super().__init__(f"Invalid address 0x{address:X}", address)


class EmptyRead(MemoryAccessError):
    """No code units could be read from a string address."""

    def __init__(self, address: int):
        super().__init__(f"Read 0 chars from wstring at 0x{address:X}", address)


class FieldError(Exception):
    """A named field could not be extracted."""

    def __init__(self, field_name: str, cause: MemoryAccessError):
        super().__init__(f"{field_name}: {cause}")
        self.field_name = field_name
        self.cause = cause
