"""Options shared by querying requests (Get and Scan)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from .call import Call, CallOption, CallOptionError
from .messages import Column, Consistency, Filter

DEFAULT_MAX_VERSIONS = 1
"""Default maximum number of versions returned per cell."""
MIN_TIMESTAMP = 0
"""Default lower bound of a time range."""
MAX_TIMESTAMP = 2**64 - 1
"""Default upper bound of a time range."""
DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY = 2**31 - 1
"""Default maximum number of cells returned per column family in a row."""
DEFAULT_CACHE_BLOCKS = True
"""Default setting of the server's block cache for queries."""

_MAX_INT32 = 2**31 - 1
_U64_MASK = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ConsistencyType(IntEnum):
    """Consistency of data requested by a query."""

    DEFAULT = 0
    STRONG = 1
    TIMELINE = 2

    def to_proto(self) -> Consistency:
        """Return the wire value; the default has none and raises ``ValueError``."""
        if self is ConsistencyType.TIMELINE:
            return Consistency.TIMELINE
        if self is ConsistencyType.STRONG:
            return Consistency.STRONG
        raise ValueError("default consistency depends on context")


@dataclass
class QueryOptions:
    """Settings common to Get and Scan requests."""

    families: Mapping[str, Sequence[str]] | None = None
    filter: Filter | None = None
    from_timestamp: int = MIN_TIMESTAMP
    to_timestamp: int = MAX_TIMESTAMP
    max_versions: int = DEFAULT_MAX_VERSIONS
    store_limit: int = DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
    store_offset: int = 0
    cache_blocks: bool = DEFAULT_CACHE_BLOCKS
    consistency: ConsistencyType = ConsistencyType.DEFAULT


def families_to_column(families: Mapping[str, Sequence[str]] | None) -> list[Column]:
    """Convert a family-to-qualifiers mapping into columns."""
    if not families:
        return []
    return [
        Column(family=family.encode(), qualifiers=[q.encode() for q in qualifiers])
        for family, qualifiers in families.items()
    ]


def _query_of(call: Call, message: str) -> QueryOptions:
    query = getattr(call, "query", None)
    if not isinstance(query, QueryOptions):
        raise CallOptionError(message)
    return query


def _to_filter(f: Any) -> Filter:
    if isinstance(f, Filter):
        return f
    build = getattr(f, "to_proto", None)
    if callable(build):
        return build()
    raise TypeError(f"cannot build a filter from {f!r}")


def _unix_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    micros = (moment - _EPOCH) // timedelta(microseconds=1)
    millis = micros // 1000 if micros >= 0 else -((-micros) // 1000)
    return millis & _U64_MASK


def families(f: Mapping[str, Sequence[str]]) -> CallOption:
    """Restrict a Get or Scan to the given families and qualifiers."""

    def option(call: Call) -> None:
        query = _query_of(call, "'Families' option can only be used with Get or Scan request")
        query.families = f

    return option


def filters(f: Any) -> CallOption:
    """Attach a filter (a message or an object with ``to_proto``) to a Get or Scan."""

    def option(call: Call) -> None:
        query = _query_of(call, "'Filters' option can only be used with Get or Scan request")
        query.filter = _to_filter(f)

    return option


def time_range(start: datetime, end: datetime) -> CallOption:
    """Restrict a query to cells with timestamps in ``[start, end)``."""
    return time_range_uint64(_unix_millis(start), _unix_millis(end))


def time_range_uint64(start: int, end: int) -> CallOption:
    """Restrict a query to millisecond timestamps in ``[start, end)``."""

    def option(call: Call) -> None:
        query = _query_of(call, "'TimeRange' option can only be used with Get or Scan request")
        if start >= end:
            raise CallOptionError("'from' timestamp is greater or equal to 'to' timestamp")
        query.from_timestamp = start
        query.to_timestamp = end

    return option


def max_versions(versions: int) -> CallOption:
    """Set the maximum number of versions returned per cell."""

    def option(call: Call) -> None:
        query = _query_of(call, "'MaxVersions' option can only be used with Get or Scan request")
        if versions > _MAX_INT32:
            raise CallOptionError("'MaxVersions' exceeds supported number of versions")
        query.max_versions = versions

    return option


def max_results_per_column_family(max_results: int) -> CallOption:
    """Set the maximum number of cells returned per column family in a row."""

    def option(call: Call) -> None:
        query = _query_of(
            call,
            "'MaxResultsPerColumnFamily' option can only be used with Get or Scan request")
        if max_results > _MAX_INT32:
            raise CallOptionError(
                "'MaxResultsPerColumnFamily' exceeds supported number of value results")
        query.store_limit = max_results

    return option


def result_offset(offset: int) -> CallOption:
    """Set the offset of the first cell returned within a column family."""

    def option(call: Call) -> None:
        query = _query_of(call, "'ResultOffset' option can only be used with Get or Scan request")
        if offset > _MAX_INT32:
            raise CallOptionError("'ResultOffset' exceeds supported offset value")
        query.store_offset = offset

    return option


def cache_blocks(enabled: bool) -> CallOption:
    """Enable or disable the server's block cache for the request."""

    def option(call: Call) -> None:
        query = _query_of(call, "'CacheBlocks' option can only be used with Get or Scan request")
        query.cache_blocks = enabled

    return option


def consistency(value: ConsistencyType) -> CallOption:
    """Request the given consistency of data."""

    def option(call: Call) -> None:
        query = _query_of(call, "'Consistency' option can only be used with Get or Scan requests")
        query.consistency = value

    return option