import pytest

from hbaserpc.call import CallOptionError, CellBlockError, RegionInfo, skip_batch
from hbaserpc.get import Get, GetProto, GetRequest, GetResponse
from hbaserpc.messages import (
    Cell,
    CellType,
    Column,
    Consistency,
    Filter,
    RegionSpecifier,
    RegionSpecifierType,
    ResultProto,
    TimeRange,
)
from hbaserpc.query import (
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    ConsistencyType,
    cache_blocks,
    consistency,
    families,
    filters,
    max_results_per_column_family,
    max_versions,
    result_offset,
    time_range_uint64,
)

RS = RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=b"region")
FILTER = Filter(name="FilterList", serialized_filter=b"\x08\x01")

CELLBLOCK = bytes([0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
                   102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109,
                   121, 32, 110, 97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46])


def _expected_cells():
    return [
        Cell(row=b"row7", family=b"cf", qualifier=b"b", timestamp=1494873081120,
             value=b"Hello my name is Dog."),
        Cell(row=b"row7", family=b"cf", qualifier=b"a", timestamp=1494873081120,
             value=b"Hello my name is Dog.", cell_type=CellType.PUT),
    ]


def _proto(get):
    get.region = RegionInfo(name=b"region")
    return get.to_proto()


def test_new_get_attributes():
    ctx = object()
    fam = {"info": ["c1"]}
    get = Get(b"test", b"45", context=ctx)
    assert (get.context, get.table, get.key, get.families) == (ctx, b"test", b"45", None)
    get = Get("test", "45", context=ctx)
    assert (get.table, get.key) == (b"test", b"45")
    get = Get(b"test", b"45", families(fam))
    assert get.families == fam
    get = Get(b"test", b"45", filters(FILTER))
    assert get.query.filter == FILTER and get.families is None
    get = Get(b"test", b"45", filters(FILTER), families(fam))
    assert get.families == fam and get.query.filter == FILTER
    get = Get(b"test", b"45", filters(FILTER))
    families(fam)(get)
    assert get.families == fam and get.query.filter == FILTER


def test_new_get_max_versions_limits():
    assert Get(b"test", b"45", max_versions(2**31 - 1)).query.max_versions == 2**31 - 1
    with pytest.raises(CallOptionError) as info:
        Get(b"test", b"45", max_versions(2**31))
    assert str(info.value) == "'MaxVersions' exceeds supported number of versions"


def test_get_to_proto_default():
    assert _proto(Get("", "key")) == GetRequest(
        region=RS, get=GetProto(row=b"key", columns=[], time_range=TimeRange()))


def test_get_to_proto_explicit_defaults():
    get = Get("", "key",
              max_results_per_column_family(DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY),
              result_offset(0),
              max_versions(DEFAULT_MAX_VERSIONS),
              cache_blocks(True),
              time_range_uint64(MIN_TIMESTAMP, MAX_TIMESTAMP))
    assert _proto(get) == GetRequest(
        region=RS, get=GetProto(row=b"key", columns=[], time_range=TimeRange()))


def test_get_to_proto_non_defaults():
    get = Get("", "key",
              max_results_per_column_family(22),
              result_offset(7),
              max_versions(4),
              cache_blocks(False),
              time_range_uint64(3456, 6789))
    assert _proto(get) == GetRequest(
        region=RS,
        get=GetProto(row=b"key", columns=[], time_range=TimeRange(start=3456, end=6789),
                     store_limit=22, store_offset=7, max_versions=4, cache_blocks=False))


def test_get_to_proto_filters_families_exists_only():
    get = Get("", "key", filters(FILTER), families({"cookie": ["got", "it"]}))
    get.exists_only()
    assert _proto(get) == GetRequest(
        region=RS,
        get=GetProto(row=b"key",
                     columns=[Column(family=b"cookie", qualifiers=[b"got", b"it"])],
                     time_range=TimeRange(), existence_only=True, filter=FILTER))


def test_get_to_proto_consistency():
    get = Get("", "key", consistency(ConsistencyType.TIMELINE))
    assert _proto(get).get.consistency is Consistency.TIMELINE


def test_get_to_proto_requires_region():
    with pytest.raises(ValueError):
        Get("", "key").to_proto()


def test_get_names_and_response():
    get = Get("t", "k")
    assert get.name() == "Get"
    assert get.description() == "Get"
    assert get.new_response() == GetResponse()


def test_get_skip_batch():
    assert Get("t", "k").skip_batch() is False
    assert Get("t", "k", skip_batch()).skip_batch() is True


def test_deserialize_cell_blocks_get():
    expected = _expected_cells()
    resp = GetResponse(result=ResultProto(cells=[expected[0]], associated_cell_count=1))
    read = Get(b"", b"").deserialize_cell_blocks(resp, CELLBLOCK)
    assert resp.result.cells == expected
    assert read == len(CELLBLOCK)


def test_deserialize_cell_blocks_get_error():
    resp = GetResponse(result=ResultProto(associated_cell_count=1))
    with pytest.raises(CellBlockError):
        Get(b"", b"").deserialize_cell_blocks(resp, CELLBLOCK[:10])


def test_deserialize_cell_blocks_without_result():
    assert Get(b"", b"").deserialize_cell_blocks(GetResponse(), CELLBLOCK) == 0