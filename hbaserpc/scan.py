"""The Scan call: read a range of rows sequentially."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .call import Call, CallOption, CallOptionError, apply_options
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

DEFAULT_MAX_RESULT_SIZE = 2097152
"""Default maximum number of bytes fetched by one call to the scanner (2MB)."""
DEFAULT_NUMBER_OF_ROWS = 2**31 - 1
"""Default maximum number of rows fetched by one call to the scanner."""

_NO_SCANNER_ID = 2**64 - 1


def _as_bytes(value: str | bytes | None) -> bytes | None:
    if isinstance(value, str):
        return value.encode()
    return value


@dataclass
class ScanProto:
    """The Scan part of a Scan request."""

    columns: list[Column] = field(default_factory=list)
    start_row: bytes | None = None
    stop_row: bytes | None = None
    filter: Filter | None = None
    time_range: TimeRange | None = None
    max_versions: int | None = None
    cache_blocks: bool | None = None
    max_result_size: int | None = None
    store_limit: int | None = None
    store_offset: int | None = None
    reversed: bool | None = None
    consistency: Consistency | None = None


@dataclass
class ScanRequest:
    """A Scan request addressed to a region."""

    region: RegionSpecifier | None = None
    scan: ScanProto | None = None
    scanner_id: int | None = None
    number_of_rows: int | None = None
    close_scanner: bool | None = None
    client_handles_partials: bool | None = None
    client_handles_heartbeats: bool | None = None


@dataclass
class ScanResponse:
    """Response to a Scan request."""

    cells_per_result: list[int] = field(default_factory=list)
    scanner_id: int | None = None
    more_results: bool | None = None
    ttl: int | None = None
    results: list[ResultProto] = field(default_factory=list)
    stale: bool | None = None
    partial_flag_per_result: list[bool] = field(default_factory=list)
    more_results_in_region: bool | None = None
    heartbeat_message: bool | None = None


class Scan(Call):
    """A scanner over a table, optionally limited to ``[start_row, stop_row)``."""

    def __init__(self, table: str | bytes | None, *args: CallOption,
                 start_row: str | bytes | None = None, stop_row: str | bytes | None = None,
                 context: Any = None) -> None:
        start = _as_bytes(start_row)
        super().__init__(_as_bytes(table), start, context=context)
        self.query = QueryOptions()
        self._start_row = start
        self._stop_row = _as_bytes(stop_row)
        self._scanner_id = _NO_SCANNER_ID
        self._max_result_size = DEFAULT_MAX_RESULT_SIZE
        self._number_of_rows = DEFAULT_NUMBER_OF_ROWS
        self._reversed = False
        self._close_scanner = False
        self._allow_partial_results = False
        apply_options(self, *args)

    @property
    def families(self) -> Mapping[str, Sequence[str]] | None:
        """Families and qualifiers requested."""
        return self.query.families

    def __str__(self) -> str:
        q = self.query
        return (
            f"Scan{{Table={self.table!r} StartRow={self._start_row!r} "
            f"StopRow={self._stop_row!r} "
            f"TimeRange=({q.from_timestamp}, {q.to_timestamp}) "
            f"MaxVersions={q.max_versions} NumberOfRows={self._number_of_rows} "
            f"MaxResultSize={self._max_result_size} Familes={q.families} "
            f"Filter={q.filter} StoreLimit={q.store_limit} StoreOffset={q.store_offset} "
            f"ScannerID={self._scanner_id} Close={str(self._close_scanner).lower()}}}"
        )

    def name(self) -> str:
        return "Scan"

    def description(self) -> str:
        return self.name()

    def start_row(self) -> bytes | None:
        """Start key (inclusive) of this scanner."""
        return self._start_row

    def stop_row(self) -> bytes | None:
        """End key (exclusive) of this scanner."""
        return self._stop_row

    def is_closing(self) -> bool:
        """Whether this scan closes the scanner prematurely."""
        return self._close_scanner

    def allow_partial_results(self) -> bool:
        """Whether the client handles partial rows."""
        return self._allow_partial_results

    def reversed(self) -> bool:
        """Whether the scanner scans in reverse key order."""
        return self._reversed

    def number_of_rows(self) -> int:
        """How many rows are fetched from the region server per response."""
        return self._number_of_rows

    def to_proto(self) -> ScanRequest:
        request = ScanRequest(
            region=self.region_specifier(),
            close_scanner=self._close_scanner,
            number_of_rows=self._number_of_rows,
            client_handles_partials=True,
            client_handles_heartbeats=True,
        )
        if self._scanner_id != _NO_SCANNER_ID:
            request.scanner_id = self._scanner_id
            return request

        q = self.query
        scan = ScanProto(
            columns=families_to_column(q.families),
            start_row=self._start_row,
            stop_row=self._stop_row,
            time_range=TimeRange(),
            max_result_size=self._max_result_size,
        )
        if q.max_versions != DEFAULT_MAX_VERSIONS:
            scan.max_versions = q.max_versions
        if q.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            scan.store_limit = q.store_limit
        if q.store_offset != 0:
            scan.store_offset = q.store_offset
        if q.from_timestamp != MIN_TIMESTAMP:
            scan.time_range.start = q.from_timestamp
        if q.to_timestamp != MAX_TIMESTAMP:
            scan.time_range.end = q.to_timestamp
        if self._reversed:
            scan.reversed = True
        if q.cache_blocks != DEFAULT_CACHE_BLOCKS:
            scan.cache_blocks = q.cache_blocks
        if q.consistency != ConsistencyType.DEFAULT:
            scan.consistency = q.consistency.to_proto()
        scan.filter = q.filter
        request.scan = scan
        return request

    def new_response(self) -> ScanResponse:
        return ScanResponse()

    def deserialize_cell_blocks(self, response: ScanResponse, data: bytes) -> int:
        """Fill the response's results from the cells in ``data``; return bytes read."""
        view = memoryview(data)
        partials = response.partial_flag_per_result
        results: list[ResultProto] = []
        read = 0
        for i, num_cells in enumerate(response.cells_per_result):
            cells, size = _decode_cells(view[read:], num_cells)
            results.append(ResultProto(cells=cells, partial=partials[i]))
            read += size
        response.results = results
        return read


def _scan_of(call: Call, message: str) -> Scan:
    if not isinstance(call, Scan):
        raise CallOptionError(message)
    return call


def scanner_id(scanner: int) -> CallOption:
    """Fetch the next results of an ongoing scan with the given scanner id."""

    def option(call: Call) -> None:
        _scan_of(call, "'ScannerID' option can only be used with Scan queries")._scanner_id = scanner

    return option


def close_scanner() -> CallOption:
    """Close the scanner after the first result is returned."""

    def option(call: Call) -> None:
        _scan_of(call, "'Close' option can only be used with Scan queries")._close_scanner = True

    return option


def max_result_size(n: int) -> CallOption:
    """Set the maximum number of bytes fetched per scanner call; must be positive."""

    def option(call: Call) -> None:
        scan = _scan_of(call, "'MaxResultSize' option can only be used with Scan queries")
        if n == 0:
            raise CallOptionError("'MaxResultSize' option must be greater than 0")
        scan._max_result_size = n

    return option


def number_of_rows(n: int) -> CallOption:
    """Set how many rows are fetched with each request to the region server."""

    def option(call: Call) -> None:
        _scan_of(call, "'NumberOfRows' option can only be used with Scan queries")\
            ._number_of_rows = n

    return option


def allow_partial_results() -> CallOption:
    """Let the scanner return partial rows."""

    def option(call: Call) -> None:
        _scan_of(call, "'AllowPartialResults' option can only be used with Scan queries")\
            ._allow_partial_results = True

    return option


def reversed_order() -> CallOption:
    """Scan in reverse key order; the start key is then greater than the stop key."""

    def option(call: Call) -> None:
        _scan_of(call, "'Reversed' option can only be used with Scan queries")._reversed = True

    return option