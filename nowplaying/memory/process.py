"""
Process enumeration and attachment using Windows API.

Provides process/module lookup, handle management, and the
ReadProcessMemory wrapper that every higher-level read is built on.
"""

from __future__ import annotations

import ctypes
import ctypes.wintypes as wt
import functools
import logging
from dataclasses import dataclass
from typing import Protocol

from .errors import AccessDeniedError, ModuleNotFoundInProcessError, ProcessNotFoundError

log = logging.getLogger(__name__)

# Windows constants
PROCESS_VM_READ = 0x0010
PROCESS_QUERY_INFORMATION = 0x0400
TH32CS_SNAPPROCESS = 0x00000002
TH32CS_SNAPMODULE = 0x00000008
TH32CS_SNAPMODULE32 = 0x00000010
INVALID_HANDLE_VALUE = ctypes.c_void_p(-1).value
MAX_PATH = 260
MAX_MODULE_NAME32 = 255


class PROCESSENTRY32W(ctypes.Structure):
    _fields_ = [
        ("dwSize", wt.DWORD),
        ("cntUsage", wt.DWORD),
        ("th32ProcessID", wt.DWORD),
        ("th32DefaultHeapID", ctypes.POINTER(ctypes.c_ulong)),
        ("th32ModuleID", wt.DWORD),
        ("cntThreads", wt.DWORD),
        ("th32ParentProcessID", wt.DWORD),
        ("pcPriClassBase", ctypes.c_long),
        ("dwFlags", wt.DWORD),
        ("szExeFile", ctypes.c_wchar * MAX_PATH),
    ]


class MODULEENTRY32W(ctypes.Structure):
    _fields_ = [
        ("dwSize", wt.DWORD),
        ("th32ModuleID", wt.DWORD),
        ("th32ProcessID", wt.DWORD),
        ("GlblcntUsage", wt.DWORD),
        ("ProccntUsage", wt.DWORD),
        ("modBaseAddr", ctypes.POINTER(ctypes.c_byte)),
        ("modBaseSize", wt.DWORD),
        ("hModule", wt.HMODULE),
        ("szModule", ctypes.c_wchar * (MAX_MODULE_NAME32 + 1)),
        ("szExePath", ctypes.c_wchar * MAX_PATH),
    ]


class MemorySource(Protocol):
    """Anything that can read raw bytes from a foreign address space."""

    def read(self, address: int, size: int) -> bytes | None:
        """Return the bytes actually read (possibly short), or None on fault."""
        ...


@functools.lru_cache(maxsize=None)
def _kernel32():
    """Bind kernel32 on first use so the package imports on any platform."""
    windll = getattr(ctypes, "windll", None)
    if windll is None:
        raise OSError("Process memory access requires Windows")

    k32 = windll.kernel32

    k32.OpenProcess.argtypes = [wt.DWORD, wt.BOOL, wt.DWORD]
    k32.OpenProcess.restype = wt.HANDLE

    k32.CloseHandle.argtypes = [wt.HANDLE]
    k32.CloseHandle.restype = wt.BOOL

    k32.ReadProcessMemory.argtypes = [
        wt.HANDLE,
        ctypes.c_void_p,
        ctypes.c_void_p,
        ctypes.c_size_t,
        ctypes.POINTER(ctypes.c_size_t),
    ]
    k32.ReadProcessMemory.restype = wt.BOOL

    k32.CreateToolhelp32Snapshot.argtypes = [wt.DWORD, wt.DWORD]
    k32.CreateToolhelp32Snapshot.restype = wt.HANDLE

    k32.Process32FirstW.argtypes = [wt.HANDLE, ctypes.POINTER(PROCESSENTRY32W)]
    k32.Process32FirstW.restype = wt.BOOL

    k32.Process32NextW.argtypes = [wt.HANDLE, ctypes.POINTER(PROCESSENTRY32W)]
    k32.Process32NextW.restype = wt.BOOL

    k32.Module32FirstW.argtypes = [wt.HANDLE, ctypes.POINTER(MODULEENTRY32W)]
    k32.Module32FirstW.restype = wt.BOOL

    k32.Module32NextW.argtypes = [wt.HANDLE, ctypes.POINTER(MODULEENTRY32W)]
    k32.Module32NextW.restype = wt.BOOL

    return k32


@dataclass
class ProcessInfo:
    """Information about a running process."""
    pid: int
    name: str


@dataclass
class ModuleInfo:
    """Information about a loaded module in a process."""
    name: str
    base_address: int
    size: int
    path: str


def enumerate_processes() -> list[ProcessInfo]:
    """List all running processes."""
    kernel32 = _kernel32()
    processes: list[ProcessInfo] = []

    snap = kernel32.CreateToolhelp32Snapshot(TH32CS_SNAPPROCESS, 0)
    if snap == INVALID_HANDLE_VALUE:
        return processes

    try:
        entry = PROCESSENTRY32W()
        entry.dwSize = ctypes.sizeof(PROCESSENTRY32W)

        if kernel32.Process32FirstW(snap, ctypes.byref(entry)):
            while True:
                processes.append(ProcessInfo(
                    pid=entry.th32ProcessID,
                    name=entry.szExeFile,
                ))
                if not kernel32.Process32NextW(snap, ctypes.byref(entry)):
                    break
    finally:
        kernel32.CloseHandle(snap)

    return processes


def enumerate_modules(pid: int) -> list[ModuleInfo]:
    """List modules loaded in a process."""
    kernel32 = _kernel32()
    modules: list[ModuleInfo] = []

    snap = kernel32.CreateToolhelp32Snapshot(
        TH32CS_SNAPMODULE | TH32CS_SNAPMODULE32, pid
    )
    if snap == INVALID_HANDLE_VALUE:
        return modules

    try:
        entry = MODULEENTRY32W()
        entry.dwSize = ctypes.sizeof(MODULEENTRY32W)

        if kernel32.Module32FirstW(snap, ctypes.byref(entry)):
            while True:
                base = ctypes.cast(entry.modBaseAddr, ctypes.c_void_p).value or 0
                modules.append(ModuleInfo(
                    name=entry.szModule,
                    base_address=base,
                    size=entry.modBaseSize,
                    path=entry.szExePath,
                ))
                if not kernel32.Module32NextW(snap, ctypes.byref(entry)):
                    break
    finally:
        kernel32.CloseHandle(snap)

    return modules


def find_process(name: str) -> int:
    """
    Find a process ID by executable name (case-insensitive).

    Raises ProcessNotFoundError if no process matches.
    """
    for proc in enumerate_processes():
        if proc.name.lower() == name.lower():
            log.info("Found process '%s' with PID: %d", name, proc.pid)
            return proc.pid
    raise ProcessNotFoundError(name)


class ProcessAttacher:
    """
    Read-only attachment to a process.

    Usage:
        with ProcessAttacher() as attacher:
            attacher.attach(pid)
            base = attacher.get_base_address("QQMusic.dll")
            data = attacher.read(base, 4)
    """

    def __init__(self):
        self._handle: wt.HANDLE | None = None
        self._pid: int = 0
        self._modules: list[ModuleInfo] = []

    def attach(self, pid: int) -> None:
        """
        Open a read-only handle to a process by PID.

        Raises AccessDeniedError if the handle cannot be opened.
        """
        self.detach()
        kernel32 = _kernel32()

        handle = kernel32.OpenProcess(PROCESS_VM_READ | PROCESS_QUERY_INFORMATION, False, pid)
        if not handle:
            raise AccessDeniedError(pid)

        self._handle = handle
        self._pid = pid
        log.info("Opened process handle for PID: %d", pid)

    def detach(self):
        """Close the process handle."""
        if self._handle:
            _kernel32().CloseHandle(self._handle)
        self._handle = None
        self._pid = 0
        self._modules = []

    def read(self, address: int, size: int) -> bytes | None:
        """
        Read raw bytes from process memory.

        Returns the bytes actually copied (a partial copy yields a short
        result), or None if nothing could be read.
        """
        if not self._handle:
            return None

        buf = ctypes.create_string_buffer(size)
        bytes_read = ctypes.c_size_t(0)

        _kernel32().ReadProcessMemory(
            self._handle,
            ctypes.c_void_p(address),
            buf,
            size,
            ctypes.byref(bytes_read),
        )

        if bytes_read.value == 0:
            return None

        return buf.raw[: bytes_read.value]

    def get_base_address(self, module_name: str) -> int:
        """
        Get the load address of a named module.

        Raises ModuleNotFoundInProcessError if the module is not loaded.
        """
        if not self._modules:
            self._modules = enumerate_modules(self._pid)

        for mod in self._modules:
            if mod.name.lower() == module_name.lower():
                log.info("Found module '%s' at base address: 0x%X", module_name, mod.base_address)
                return mod.base_address

        raise ModuleNotFoundInProcessError(module_name, self._pid)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.detach()

    def __del__(self):
        if self._handle:
            self.detach()
