"""The Get call: read a single row."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .call import Call, CallOption, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import (
    Column,
    Consistency,
    Filter,
    RegionSpecifier,
    ResultProto,
    TimeRange,
)
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    ConsistencyType,
    QueryOptions,
    families_to_column,
)


def _as_bytes(value: str | bytes | None) -> bytes | None:
    if isinstance(value, str):
        return value.encode()
    return value


@dataclass
class GetProto:
    """The Get part of a Get request."""

    row: bytes | None = None
    columns: list[Column] = field(default_factory=list)
    filter: Filter | None = None
    time_range: TimeRange | None = None
    max_versions: int | None = None
    cache_blocks: bool | None = None
    store_limit: int | None = None
    store_offset: int | None = None
    existence_only: bool | None = None
    consistency: Consistency | None = None


@dataclass
class GetRequest:
    """A Get request addressed to a region."""

    region: RegionSpecifier | None = None
    get: GetProto | None = None


@dataclass
class GetResponse:
    """Response to a Get request."""

    result: ResultProto | None = None


class Get(Call):
    """Reads one row of a table."""

    batchable = True

    def __init__(self, table: str | bytes | None, key: str | bytes | None,
                 *args: CallOption, context: Any = None) -> None:
        super().__init__(_as_bytes(table), _as_bytes(key), context=context)
        self.query = QueryOptions()
        self._exists_only = False
        apply_options(self, *args)

    @property
    def families(self) -> Mapping[str, Sequence[str]] | None:
        """Families and qualifiers requested."""
        return self.query.families

    def name(self) -> str:
        return "Get"

    def description(self) -> str:
        return self.name()

    def skip_batch(self) -> bool:
        """Whether this request is sent right away instead of being batched."""
        return self.skip_batching

    def exists_only(self) -> None:
        """Ask only whether the row exists, without returning its cells."""
        self._exists_only = True

    def to_proto(self) -> GetRequest:
        q = self.query
        get = GetProto(
            row=self.key,
            columns=families_to_column(q.families),
            time_range=TimeRange(),
        )
        if q.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            get.store_limit = q.store_limit
        if q.store_offset != 0:
            get.store_offset = q.store_offset
        if q.max_versions != DEFAULT_MAX_VERSIONS:
            get.max_versions = q.max_versions
        if q.from_timestamp != MIN_TIMESTAMP:
            get.time_range.start = q.from_timestamp
        if q.to_timestamp != MAX_TIMESTAMP:
            get.time_range.end = q.to_timestamp
        if self._exists_only:
            get.existence_only = True
        if q.cache_blocks != DEFAULT_CACHE_BLOCKS:
            get.cache_blocks = q.cache_blocks
        if q.consistency != ConsistencyType.DEFAULT:
            get.consistency = q.consistency.to_proto()
        get.filter = q.filter
        return GetRequest(region=self.region_specifier(), get=get)

    def new_response(self) -> GetResponse:
        return GetResponse()

    def deserialize_cell_blocks(self, response: GetResponse, data: bytes) -> int:
        """Append the cells encoded in ``data`` to the response; return bytes read."""
        if response.result is None:
            return 0
        cells, read = _decode_cells(data, response.result.associated_cell_count or 0)
        response.result.cells.extend(cells)
        return read