"""
Per-field extraction: pointer chain + string decode or integer read.

Each field carries its own failure policy so the defaulting rules live
here and nowhere else:

    REPORT   -> errors come back to the caller, value defaults to "" / 0
    DEFAULT  -> errors are absorbed (debug log only), value defaults to "" / 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import FieldError, MemoryAccessError
from .resolver import AddressResolver
from .strings import StringDecoder

log = logging.getLogger(__name__)


class FieldKind(str, Enum):
    STRING = "string"
    UINT32 = "uint32"


class FieldPolicy(str, Enum):
    REPORT = "report"
    DEFAULT = "default"


@dataclass(frozen=True)
class FieldSpec:
    """
    Where a logical field lives in the target.

    Address = resolve(module_base + base_offset, chain) + terminal_offset
    """
    name: str
    kind: FieldKind
    base_offset: int
    chain: tuple[int, ...] = ()
    terminal_offset: int = 0
    policy: FieldPolicy = FieldPolicy.REPORT


@dataclass(frozen=True)
class FieldResult:
    name: str
    value: str | int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FieldExtractor:
    """Reads FieldSpecs relative to a module base."""

    def __init__(self, resolver: AddressResolver, decoder: StringDecoder, module_base: int):
        self.resolver = resolver
        self.decoder = decoder
        self.module_base = module_base

    def locate(self, spec: FieldSpec) -> int:
        """Resolve a field's final address."""
        address = self.resolver.resolve_valid(self.module_base + spec.base_offset, spec.chain)
        return address + spec.terminal_offset

    def read_string(self, spec: FieldSpec) -> str:
        """Raises FieldError on any failure along the path."""
        try:
            address = self.locate(spec)
            value = self.decoder.decode(address)
        except MemoryAccessError as e:
            raise FieldError(spec.name, e) from e
        log.debug("Read %s: %r", spec.name, value)
        return value

    def read_int(self, spec: FieldSpec) -> int:
        """Never raises; any failure yields 0."""
        try:
            return self._read_int(spec)
        except FieldError as e:
            log.debug("Read %s failed, defaulting to 0: %s", spec.name, e.cause)
            return 0

    def _read_int(self, spec: FieldSpec) -> int:
        try:
            value = self.resolver.read_u32(self.locate(spec))
        except MemoryAccessError as e:
            raise FieldError(spec.name, e) from e
        log.debug("Read %s: %d", spec.name, value)
        return value

    def extract(self, spec: FieldSpec) -> FieldResult:
        """Read a field according to its kind and policy."""
        if spec.kind is FieldKind.UINT32 and spec.policy is FieldPolicy.DEFAULT:
            return FieldResult(spec.name, self.read_int(spec))

        default: str | int = "" if spec.kind is FieldKind.STRING else 0
        reader = self.read_string if spec.kind is FieldKind.STRING else self._read_int

        try:
            return FieldResult(spec.name, reader(spec))
        except FieldError as e:
            if spec.policy is FieldPolicy.DEFAULT:
                log.debug("%s unavailable, defaulting: %s", spec.name, e.cause)
                return FieldResult(spec.name, default)
            log.debug("%s unavailable: %s", spec.name, e.cause)
            return FieldResult(spec.name, default, str(e.cause))
