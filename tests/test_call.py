import pytest

from hbaserpc.call import (
    Call,
    CallOptionError,
    CellBlockError,
    RegionInfo,
    Result,
    apply_options,
    cell_from_cell_block,
    deserialize_cell_blocks,
    parse_table_name,
    skip_batch,
    to_local_result,
)
from hbaserpc.messages import Cell, CellType, RegionSpecifier, RegionSpecifierType, ResultProto

CELLBLOCK = bytes([0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
                   102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109,
                   121, 32, 110, 97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46])

CELLBLOCKS = bytes([0, 0, 0, 50, 0, 0, 0, 41, 0, 0, 0, 1, 0, 26, 84, 101, 115, 116, 83, 99,
                    97, 110, 84, 105, 109, 101, 82, 97, 110, 103, 101, 86, 101, 114, 115, 105,
                    111, 110, 115, 49, 2, 99, 102, 97, 0, 0, 0, 0, 0, 0, 0, 51, 4, 49, 0, 0, 0,
                    50, 0, 0, 0, 41, 0, 0, 0, 1, 0, 26, 84, 101, 115, 116, 83, 99, 97, 110, 84,
                    105, 109, 101, 82, 97, 110, 103, 101, 86, 101, 114, 115, 105, 111, 110, 115,
                    50, 2, 99, 102, 97, 0, 0, 0, 0, 0, 0, 0, 52, 4, 49])

EXPECTED_CELLS = [
    Cell(row=b"TestScanTimeRangeVersions1", family=b"cf", qualifier=b"a", timestamp=51,
         value=b"1", cell_type=CellType.PUT),
    Cell(row=b"TestScanTimeRangeVersions2", family=b"cf", qualifier=b"a", timestamp=52,
         value=b"1", cell_type=CellType.PUT),
]


class _Probe(Call):
    def name(self):
        return "Probe"

    def to_proto(self):
        return self.region_specifier()

    def new_response(self):
        return ResultProto()


class _BatchableProbe(_Probe):
    batchable = True


def test_cell_from_cell_block():
    cell, n = cell_from_cell_block(CELLBLOCK)
    assert n == len(CELLBLOCK)
    assert cell == Cell(row=b"row7", family=b"cf", qualifier=b"a", timestamp=1494873081120,
                        value=b"Hello my name is Dog.", cell_type=CellType.PUT)


@pytest.mark.parametrize("size", range(len(CELLBLOCK)))
def test_cell_from_cell_block_truncated(size):
    with pytest.raises(CellBlockError):
        cell_from_cell_block(CELLBLOCK[:size])


def test_cell_from_cell_block_lying_length():
    data = bytearray(CELLBLOCK)
    data[3] = 42
    with pytest.raises(CellBlockError) as info:
        cell_from_cell_block(data)
    assert str(info.value) == "HBase has lied about KeyValue length: expected 42, got 48"


def test_deserialize_cell_blocks():
    cells, read = deserialize_cell_blocks(CELLBLOCKS, 2)
    assert read == len(CELLBLOCKS)
    assert cells == EXPECTED_CELLS


def test_deserialize_cell_blocks_too_small():
    with pytest.raises(CellBlockError) as info:
        deserialize_cell_blocks(CELLBLOCKS[:100], 2)
    assert str(info.value) == "buffer is too small: expected 54, got 46"


def test_deserialize_cell_blocks_partial_count():
    cells, read = deserialize_cell_blocks(CELLBLOCKS, 1)
    assert cells == EXPECTED_CELLS[:1]
    assert read == 54


@pytest.mark.parametrize(
    ("table", "expected"),
    [
        (b"ns:tbl", (b"ns", b"tbl")),
        (b"tbl", (b"default", b"tbl")),
        (b"a:b:c", (b"a", b"b:c")),
    ],
)
def test_parse_table_name(table, expected):
    assert parse_table_name(table) == expected


def test_apply_options_stops_at_first_error():
    applied = []

    def ok(call):
        applied.append("ok")

    def bad(call):
        raise CallOptionError("nope")

    def later(call):
        applied.append("later")

    call = _Probe(b"t", b"k")
    with pytest.raises(CallOptionError, match="nope"):
        apply_options(call, ok, bad, later)
    assert applied == ["ok"]
    assert call.options == (ok, bad, later)


def test_skip_batch_rejects_non_batchable():
    with pytest.raises(CallOptionError) as info:
        apply_options(_Probe(), skip_batch())
    assert str(info.value) == "'SkipBatch' option only works with Get and Mutate requests"


def test_skip_batch_sets_flag():
    call = _BatchableProbe()
    assert call.skip_batching is False
    apply_options(call, skip_batch())
    assert call.skip_batching is True


def test_region_specifier_uses_region_name():
    call = _Probe(b"t", b"k")
    call.region = RegionInfo(name=b"region")
    assert call.to_proto() == RegionSpecifier(type=RegionSpecifierType.REGION_NAME,
                                              value=b"region")


def test_region_specifier_prefers_region_override():
    custom = RegionSpecifier(type=RegionSpecifierType.ENCODED_REGION_NAME, value=b"enc")

    class _Region(RegionInfo):
        def region_specifier(self):
            return custom

    call = _Probe()
    call.region = _Region(name=b"region")
    assert call.region_specifier() is custom


def test_region_specifier_without_region():
    call = _Probe(b"t", b"k")
    with pytest.raises(ValueError):
        Call.region_specifier(call)


def test_description_defaults_to_name():
    call = _Probe(context="ctx")
    assert Call.description(call) == "Probe"
    assert call.context == "ctx"


def test_to_local_result_none():
    assert to_local_result(None) == Result()


def test_to_local_result_shares_cells():
    pbr = ResultProto(cells=list(EXPECTED_CELLS), stale=True, partial=None, exists=False)
    result = to_local_result(pbr)
    assert result.cells is pbr.cells
    assert result.stale is True
    assert result.partial is False
    assert result.exists is False


def test_result_str():
    assert str(Result()) == "cells:[] stale:False partial:False exists:None "