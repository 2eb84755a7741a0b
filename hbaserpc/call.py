"""Common machinery for HBase RPC calls and decoding of cell blocks."""

from __future__ import annotations

import queue
import struct
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .messages import Cell, CellType, RegionSpecifier, RegionSpecifierType, ResultProto

_U32_MASK = 0xFFFFFFFF


class CallOptionError(ValueError):
    """An option could not be applied to a call."""


class CellBlockError(ValueError):
    """A cell block could not be decoded."""


@dataclass
class RegionInfo:
    """Identity of an HBase region that a call is sent to."""

    name: bytes
    id: int = 0
    start_key: bytes = b""
    stop_key: bytes = b""
    namespace: bytes = b""
    table: bytes = b""


@dataclass
class RPCResult:
    """Outcome of an RPC: the response message or the error that occurred."""

    msg: Any = None
    error: BaseException | None = None


CallOption = Callable[["Call"], None]


class Call(ABC):
    """Base of every HBase RPC call."""

    batchable: ClassVar[bool] = False

    def __init__(self, table: bytes | None = b"", key: bytes | None = b"", *,
                 context: Any = None) -> None:
        self.table = table
        self.key = key
        self.context = context
        self.options: tuple[CallOption, ...] = ()
        self.region: Any = None
        self.skip_batching = False
        self.result_queue: queue.Queue[RPCResult] = queue.Queue(maxsize=1)

    @abstractmethod
    def name(self) -> str:
        """Name of the RPC method."""

    def description(self) -> str:
        """Description used for tracing and metrics."""
        return self.name()

    @abstractmethod
    def to_proto(self) -> Any:
        """Build the request message."""

    @abstractmethod
    def new_response(self) -> Any:
        """Create an empty message to hold the response."""

    def region_specifier(self) -> RegionSpecifier:
        """Return the specifier of the region this call is addressed to."""
        if self.region is None:
            raise ValueError("call has no region assigned")
        custom = getattr(self.region, "region_specifier", None)
        if callable(custom):
            return custom()
        return RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=self.region.name)


def skip_batch() -> CallOption:
    """Option telling the client to send a Get or Mutate right away, unbatched."""

    def option(call: Call) -> None:
        if not call.batchable:
            raise CallOptionError("'SkipBatch' option only works with Get and Mutate requests")
        call.skip_batching = True

    return option


def parse_table_name(table: bytes) -> tuple[bytes, bytes]:
    """Split ``namespace:table`` into its parts; the namespace defaults to ``default``."""
    namespace, sep, name = table.partition(b":")
    if not sep:
        return b"default", table
    return namespace, name


def apply_options(call: Call, *args: CallOption) -> None:
    """Record the options on ``call`` and apply them in order."""
    call.options = args
    for option in args:
        option(call)


class _Cursor:
    """Bounds-checked big-endian reader over a buffer."""

    def __init__(self, view: memoryview, offset: int) -> None:
        self._view = view
        self.offset = offset

    def _need(self, size: int) -> int:
        start = self.offset
        end = start + size
        if end > len(self._view):
            raise CellBlockError(
                f"malformed cell block: need {end} bytes, have {len(self._view)}")
        self.offset = end
        return start

    def take(self, size: int) -> bytes:
        start = self._need(size)
        return bytes(self._view[start:start + size])

    def unpack(self, fmt: str, size: int) -> int:
        start = self._need(size)
        return struct.unpack_from(fmt, self._view, start)[0]


def _cell_type(value: int) -> CellType | int:
    try:
        return CellType(value)
    except ValueError:
        return value


def cell_from_cell_block(data: bytes | bytearray | memoryview) -> tuple[Cell, int]:
    """Decode one cell from the start of ``data``; return it and the bytes consumed."""
    view = memoryview(data)
    if len(view) < 4:
        raise CellBlockError(f"buffer is too small: expected 4, got {len(view)}")
    kv_len = struct.unpack_from(">I", view, 0)[0]
    if len(view) < kv_len + 4:
        raise CellBlockError(
            f"buffer is too small: expected {kv_len + 4}, got {len(view)}")

    cursor = _Cursor(view, 4)
    row_key_len = cursor.unpack(">I", 4)
    value_len = cursor.unpack(">I", 4)
    key_len = cursor.unpack(">H", 2)
    row = cursor.take(key_len)
    family_len = cursor.unpack(">B", 1)
    family = cursor.take(family_len)

    qualifier_len = (row_key_len - key_len - family_len - 2 - 1 - 8 - 1) & _U32_MASK
    total = (4 + 4 + 2 + key_len + 1 + family_len + qualifier_len + 8 + 1 + value_len) & _U32_MASK
    if total != kv_len:
        raise CellBlockError(
            f"HBase has lied about KeyValue length: expected {kv_len}, got {total}")

    qualifier = cursor.take(qualifier_len)
    timestamp = cursor.unpack(">Q", 8)
    cell_type = cursor.unpack(">B", 1)
    value = cursor.take(value_len)

    cell = Cell(row=row, family=family, qualifier=qualifier, timestamp=timestamp,
                cell_type=_cell_type(cell_type), value=value)
    return cell, kv_len + 4


def deserialize_cell_blocks(data: bytes | bytearray | memoryview,
                            count: int) -> tuple[list[Cell], int]:
    """Decode ``count`` consecutive cells; return them and the bytes consumed."""
    view = memoryview(data)
    cells: list[Cell] = []
    read = 0
    for _ in range(count):
        cell, size = cell_from_cell_block(view[read:])
        cells.append(cell)
        read += size
    return cells, read


@dataclass
class Result:
    """Cells of a row together with flags describing the response."""

    cells: list[Cell] = field(default_factory=list)
    stale: bool = False
    partial: bool = False
    exists: bool | None = None

    def __str__(self) -> str:
        return (f"cells:{self.cells} stale:{self.stale} partial:{self.partial} "
                f"exists:{self.exists} ")


def to_local_result(pbr: ResultProto | None) -> Result:
    """Convert a wire result into a :class:`Result` without copying the cells."""
    if pbr is None:
        return Result()
    return Result(cells=pbr.cells, stale=bool(pbr.stale), partial=bool(pbr.partial),
                  exists=pbr.exists)