"""Mutation calls: Put, Delete, Append and Increment of a single row."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Optional

from .call import Call, CallOption, CallOptionError, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import CellType, NameBytesPair, RegionSpecifier, ResultProto
from .query import MAX_TIMESTAMP

ATTRIBUTE_NAME_TTL = "_ttl"
"""Name of the mutation attribute carrying the time-to-live."""

_LATEST_TIMESTAMP = 2**63 - 1
_U64_MASK = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Values = Mapping[str, Optional[Mapping[str, Optional[bytes]]]]

_EMPTY_QUALIFIER: Mapping[str, Optional[bytes]] = {"": None}


class DurabilityType(IntEnum):
    """Write-ahead-log durability of a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


class MutationType(IntEnum):
    """Kind of a mutation."""

    APPEND = 0
    INCREMENT = 1
    PUT = 2
    DELETE = 3


class DeleteType(IntEnum):
    """What a delete mutation removes."""

    DELETE_ONE_VERSION = 0
    DELETE_MULTIPLE_VERSIONS = 1
    DELETE_FAMILY = 2
    DELETE_FAMILY_VERSION = 3


_CELL_TYPE_OF_DELETE = {
    DeleteType.DELETE_ONE_VERSION: CellType.DELETE,
    DeleteType.DELETE_MULTIPLE_VERSIONS: CellType.DELETE_COLUMN,
    DeleteType.DELETE_FAMILY: CellType.DELETE_FAMILY,
    DeleteType.DELETE_FAMILY_VERSION: CellType.DELETE_FAMILY_VERSION,
}


@dataclass
class QualifierValue:
    """A qualifier and its value within a column value."""

    qualifier: bytes | None = None
    value: bytes | None = None
    timestamp: int | None = None
    delete_type: DeleteType | None = None


@dataclass
class ColumnValue:
    """The qualifier values of one column family."""

    family: bytes | None = None
    qualifier_values: list[QualifierValue] = field(default_factory=list)


@dataclass
class MutationProto:
    """A mutation of one row as sent on the wire."""

    row: bytes | None = None
    mutate_type: MutationType | None = None
    column_values: list[ColumnValue] = field(default_factory=list)
    timestamp: int | None = None
    attributes: list[NameBytesPair] = field(default_factory=list)
    durability: DurabilityType | None = None
    associated_cell_count: int | None = None


@dataclass
class MutateRequest:
    """A mutate request addressed to a region, with an optional condition."""

    region: RegionSpecifier | None = None
    mutation: MutationProto | None = None
    condition: Any = None


@dataclass
class MutateResponse:
    """Response to a mutate request."""

    result: ResultProto | None = None
    processed: bool | None = None


def _as_bytes(value: str | bytes | None) -> bytes | None:
    if isinstance(value, str):
        return value.encode()
    return value


def _truncated_millis(micros: int) -> int:
    return micros // 1000 if micros >= 0 else -((-micros) // 1000)


def _cellblock(row: bytes, family: bytes, qualifier: bytes, value: bytes,
               ts: int, typ: int) -> bytes:
    key_length = 2 + len(row) + 1 + len(family) + len(qualifier) + 8 + 1
    kv_length = 4 + 4 + key_length + len(value)
    return b"".join((
        struct.pack(">IIIH", kv_length & 0xFFFFFFFF, key_length & 0xFFFFFFFF,
                    len(value) & 0xFFFFFFFF, len(row) & 0xFFFF),
        row,
        bytes([len(family) & 0xFF]),
        family,
        qualifier,
        struct.pack(">QB", ts & _U64_MASK, typ),
        value,
    ))


class Mutate(Call):
    """A mutation of one row of a table."""

    batchable = True

    def __init__(self, mutation_type: MutationType, table: str | bytes | None,
                 key: str | bytes | None, values: Values | None = None,
                 *args: CallOption, context: Any = None) -> None:
        super().__init__(_as_bytes(table), _as_bytes(key), context=context)
        self.mutation_type = MutationType(mutation_type)
        self._values = values
        self._ttl = b""
        self._timestamp = MAX_TIMESTAMP
        self._durability = DurabilityType.USE_DEFAULT
        self._delete_one_version = False
        apply_options(self, *args)

    def name(self) -> str:
        return "Mutate"

    def description(self) -> str:
        """The kind of mutation performed, such as ``PUT``."""
        return self.mutation_type.name

    def skip_batch(self) -> bool:
        """Whether this request is sent right away instead of being batched."""
        return self.skip_batching

    def values(self) -> Values | None:
        """The family/qualifier/value mapping; treat it as read-only."""
        return self._values

    def _families(self):
        """Yield each family with its qualifiers and its delete type, if any."""
        for family, qualifiers in (self._values or {}).items():
            delete_type = None
            if self.mutation_type is MutationType.DELETE:
                if not qualifiers:
                    delete_type = (DeleteType.DELETE_FAMILY_VERSION if self._delete_one_version
                                   else DeleteType.DELETE_FAMILY)
                    if qualifiers is None:
                        qualifiers = _EMPTY_QUALIFIER
                else:
                    delete_type = (DeleteType.DELETE_ONE_VERSION if self._delete_one_version
                                   else DeleteType.DELETE_MULTIPLE_VERSIONS)
            yield family, qualifiers or {}, delete_type

    def _column_values(self, ts: int | None) -> list[ColumnValue]:
        return [
            ColumnValue(
                family=family.encode(),
                qualifier_values=[
                    QualifierValue(qualifier=q.encode(), value=v, timestamp=ts,
                                   delete_type=delete_type)
                    for q, v in qualifiers.items()
                ],
            )
            for family, qualifiers, delete_type in self._families()
        ]

    def _cellblocks(self) -> tuple[bytes, int]:
        if not self._values:
            return b"", 0
        ts = _LATEST_TIMESTAMP if self._timestamp == MAX_TIMESTAMP else self._timestamp
        row = self.key or b""
        blocks: list[bytes] = []
        for family, qualifiers, delete_type in self._families():
            typ = CellType.PUT if delete_type is None else _CELL_TYPE_OF_DELETE[delete_type]
            fam = family.encode()
            blocks.extend(_cellblock(row, fam, q.encode(), v or b"", ts, typ)
                          for q, v in qualifiers.items())
        return b"".join(blocks), len(blocks)

    def _build(self, with_cellblocks: bool,
               cellblocks: list[bytes] | None) -> tuple[MutateRequest, list[bytes], int]:
        ts = None if self._timestamp == MAX_TIMESTAMP else self._timestamp
        blocks = list(cellblocks or [])
        size = 0
        mutation = MutationProto(row=self.key, mutate_type=self.mutation_type,
                                 durability=self._durability, timestamp=ts)
        if with_cellblocks:
            data, count = self._cellblocks()
            mutation.associated_cell_count = count
            size = len(data)
            if size > 0:
                blocks.append(data)
        else:
            mutation.column_values = self._column_values(ts)
        if self._ttl:
            mutation.attributes.append(NameBytesPair(name=ATTRIBUTE_NAME_TTL, value=self._ttl))
        request = MutateRequest(region=self.region_specifier(), mutation=mutation)
        return request, blocks, size

    def to_proto(self) -> MutateRequest:
        return self._build(False, None)[0]

    def new_response(self) -> MutateResponse:
        return MutateResponse()

    def deserialize_cell_blocks(self, response: MutateResponse, data: bytes) -> int:
        """Append the cells encoded in ``data`` to the response; return bytes read."""
        if response.result is None:
            return 0
        cells, read = _decode_cells(data, response.result.associated_cell_count or 0)
        response.result.cells.extend(cells)
        return read

    def serialize_cell_blocks(
            self, cellblocks: list[bytes] | None) -> tuple[MutateRequest, list[bytes], int]:
        """Build the request with values sent as cell blocks.

        Returns the request, ``cellblocks`` extended with this call's block and
        the size in bytes of the block added.
        """
        return self._build(True, cellblocks)

    def cell_blocks_enabled(self) -> bool:
        """Whether values are sent as cell blocks."""
        return True


def _mutate_of(call: Call, message: str) -> Mutate:
    if not isinstance(call, Mutate):
        raise CallOptionError(message)
    return call


def ttl(duration: timedelta) -> CallOption:
    """Set a time-to-live for the mutation, at millisecond resolution."""

    def option(call: Call) -> None:
        m = _mutate_of(call, "'TTL' option can only be used with mutation queries")
        millis = _truncated_millis(duration // timedelta(microseconds=1))
        m._ttl = (millis & _U64_MASK).to_bytes(8, "big")

    return option


def timestamp(ts: datetime) -> CallOption:
    """Set the mutation's timestamp, rounded to milliseconds."""

    def option(call: Call) -> None:
        m = _mutate_of(call, "'Timestamp' option can only be used with mutation queries")
        moment = ts if ts.tzinfo is not None else ts.astimezone()
        micros = (moment - _EPOCH) // timedelta(microseconds=1)
        m._timestamp = _truncated_millis(micros) & _U64_MASK

    return option


def timestamp_uint64(ts: int) -> CallOption:
    """Set the mutation's timestamp to an exact value."""

    def option(call: Call) -> None:
        m = _mutate_of(call, "'TimestampUint64' option can only be used with mutation queries")
        m._timestamp = ts

    return option


def durability(value: DurabilityType | int) -> CallOption:
    """Set the durability of the mutation."""

    def option(call: Call) -> None:
        m = _mutate_of(call, "'Durability' option can only be used with mutation queries")
        if not DurabilityType.USE_DEFAULT <= value <= DurabilityType.FSYNC_WAL:
            raise CallOptionError("invalid durability value")
        m._durability = DurabilityType(value)

    return option


def delete_one_version() -> CallOption:
    """Delete only one version of the given families or qualifiers."""

    def option(call: Call) -> None:
        m = _mutate_of(call, "'DeleteOneVersion' option can only be used with mutation queries")
        m._delete_one_version = True

    return option


def put(table: str | bytes | None, key: str | bytes | None, values: Values | None,
        *args: CallOption, context: Any = None) -> Mutate:
    """Insert the given family/qualifier/values into a row."""
    return Mutate(MutationType.PUT, table, key, values, *args, context=context)


def delete(table: str | bytes | None, key: str | bytes | None, values: Values | None,
           *args: CallOption, context: Any = None) -> Mutate:
    """Delete a whole row (no values), whole families (``None``) or qualifiers."""
    m = Mutate(MutationType.DELETE, table, key, values, *args, context=context)
    if not m.values() and m._delete_one_version:
        raise CallOptionError(
            "'DeleteOneVersion' option cannot be specified for delete entire row request")
    return m


def append(table: str | bytes | None, key: str | bytes | None, values: Values | None,
           *args: CallOption, context: Any = None) -> Mutate:
    """Append the given values to existing cells, creating them if needed."""
    return Mutate(MutationType.APPEND, table, key, values, *args, context=context)


def increment(table: str | bytes | None, key: str | bytes | None, values: Values | None,
              *args: CallOption, context: Any = None) -> Mutate:
    """Increment the given cells by the encoded amounts."""
    return Mutate(MutationType.INCREMENT, table, key, values, *args, context=context)


def increment_single(table: str | bytes | None, key: str | bytes | None, family: str,
                     qualifier: str, amount: int, *args: CallOption,
                     context: Any = None) -> Mutate:
    """Increment one cell by ``amount``."""
    value = (amount & _U64_MASK).to_bytes(8, "big")
    return increment(table, key, {family: {qualifier: value}}, *args, context=context)