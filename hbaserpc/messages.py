"""Message types exchanged with HBase region servers and masters.

Optional scalar fields use ``None`` for "not set", so a message can tell an
explicit default apart from a missing value. Repeated fields are lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class RegionSpecifierType(IntEnum):
    """How a region is identified in a request."""

    REGION_NAME = 1
    ENCODED_REGION_NAME = 2


@dataclass
class RegionSpecifier:
    """Names the region a request is addressed to."""

    type: RegionSpecifierType | None = None
    value: bytes | None = None


class CellType(IntEnum):
    """Kind of a key/value cell."""

    MINIMUM = 0
    PUT = 4
    DELETE = 8
    DELETE_FAMILY_VERSION = 10
    DELETE_COLUMN = 12
    DELETE_FAMILY = 14
    MAXIMUM = 255


@dataclass
class Cell:
    """A single cell: one value of one qualifier of one row."""

    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    timestamp: int | None = None
    cell_type: CellType | int | None = None
    value: bytes | None = None


@dataclass
class ResultProto:
    """A row result as sent on the wire."""

    cells: list[Cell] = field(default_factory=list)
    associated_cell_count: int | None = None
    exists: bool | None = None
    stale: bool | None = None
    partial: bool | None = None


@dataclass
class TimeRange:
    """Half-open timestamp range ``[start, end)`` in milliseconds."""

    start: int | None = None
    end: int | None = None


@dataclass
class Column:
    """A column family and the qualifiers requested from it."""

    family: bytes | None = None
    qualifiers: list[bytes] = field(default_factory=list)


class Consistency(IntEnum):
    """Read consistency requested from the server."""

    STRONG = 0
    TIMELINE = 1


@dataclass
class Filter:
    """A serialized server-side filter."""

    name: str | None = None
    serialized_filter: bytes | None = None


@dataclass
class Comparator:
    """A serialized comparator used by conditions and filters."""

    name: str | None = None
    serialized_comparator: bytes | None = None


class CompareType(IntEnum):
    """Comparison operator for conditions."""

    LESS = 0
    LESS_OR_EQUAL = 1
    EQUAL = 2
    NOT_EQUAL = 3
    GREATER_OR_EQUAL = 4
    GREATER = 5
    NO_OP = 6


@dataclass
class NameBytesPair:
    """A named binary attribute."""

    name: str | None = None
    value: bytes | None = None


@dataclass
class BytesBytesPair:
    """A binary key/value attribute."""

    first: bytes = b""
    second: bytes = b""


@dataclass
class TableName:
    """Fully qualified table name."""

    namespace: bytes = b""
    qualifier: bytes = b""


@dataclass
class ServerName:
    """Region server identity: host, port and start code."""

    host_name: str = ""
    port: int | None = None
    start_code: int | None = None


@dataclass
class RPCTInfo:
    """Tracing information carried in a request header."""

    trace_id: int | None = None
    parent_id: int | None = None
    headers: dict[str, str] | None = field(default_factory=dict)


@dataclass
class RequestHeader:
    """Header preceding every RPC request."""

    call_id: int | None = None
    trace_info: RPCTInfo | None = None
    method_name: str | None = None
    request_param: bool | None = None
    priority: int | None = None
    timeout: int | None = None


@dataclass
class AdminResponse:
    """Response of an administrative call, keyed by the call's response kind."""

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)