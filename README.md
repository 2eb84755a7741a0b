# hbaserpc

`hbaserpc` builds the request objects that a client sends to HBase region
servers and to the master. It also decodes the cell blocks that come back in
responses. Requests and responses are plain Python dataclasses. Optional
fields use `None` to mean "not set".

## Installation

```
pip install hbaserpc
```

The package has no runtime dependencies. To install the test tools as well:

```
pip install "hbaserpc[test]"
```

## What is included

Reads:

- `hbaserpc.get.Get(table, key, *options)` fetches a single row. Call
  `exists_only()` to ask only whether the row exists.
- `hbaserpc.scan.Scan(table, *options, start_row=..., stop_row=...)` scans a
  range of rows. It has its own options: `scanner_id`, `close_scanner`,
  `max_result_size`, `number_of_rows`, `allow_partial_results` and
  `reversed_order`.

Get and Scan both take the query options in `hbaserpc.query`:

- `families` and `filters`.
- `time_range`, which takes `datetime` values, and `time_range_uint64`,
  which takes milliseconds.
- `max_versions`, `max_results_per_column_family` and `result_offset`.
- `cache_blocks` and `consistency`, which takes a `ConsistencyType`.

`filters` accepts a `hbaserpc.messages.Filter`, or any object that has a
`to_proto()` method returning one.

Writes (`hbaserpc.mutate`):

- `put`, `delete`, `append`, `increment` and `increment_single` each return
  a `Mutate`.
- Options: `ttl` takes a `timedelta`. `timestamp` takes a `datetime`.
  `timestamp_uint64` takes an integer. `durability` takes a
  `DurabilityType`. `delete_one_version` takes no argument.
- What `delete` removes depends on `values`. With no values it removes the
  whole row. A family mapped to `None` removes that whole family. A family
  mapped to a mapping of qualifiers removes those qualifiers.
- `Mutate.serialize_cell_blocks(cellblocks)` returns three things: the
  request, the list of cell blocks with this row's block appended, and the
  size of that block.
- `hbaserpc.checkandput.CheckAndPut(put, family, qualifier, expected_value)`
  applies a Put only when the cell holds the expected value. It is never
  batched and does not use cell blocks.

Administration:

- Tables (`hbaserpc.tables`): `CreateTable` with the `split_keys` and
  `table_attributes` options, `CreateNamespace`, `DeleteTable`,
  `DisableTable` and `EnableTable`. Each family in a new table gets the
  attributes in `DEFAULT_FAMILY_ATTRIBUTES` unless you give your own.
- Listing tables (`hbaserpc.listing`): `ListTableNames` with the
  `list_regex`, `list_namespace` and `list_sys_tables` options.
- Cluster (`hbaserpc.admin`): `SetBalancer`, `MoveRegion` with the
  `with_destination_region_server("<host>,<port>,<startcode>")` option,
  `GetProcedureState` and `ClusterStatus`.
- Snapshots (`hbaserpc.snapshot`): `Snapshot` with the `snapshot_version`,
  `snapshot_owner` and `snapshot_skip_flush` options. `SnapshotDone`,
  `DeleteSnapshot`, `RestoreSnapshot` and `RestoreSnapshotDone` each wrap a
  `Snapshot`. `ListSnapshots` lists them.

Cell blocks and results (`hbaserpc.call`):

- `cell_from_cell_block` and `deserialize_cell_blocks` decode the
  length-prefixed KeyValue format. Each returns the decoded cells and the
  number of bytes consumed.
- `Get`, `Scan` and `Mutate` each have a `deserialize_cell_blocks(response,
  data)` method that fills the response from cell block data.
- `to_local_result` converts a `ResultProto` into a `Result`.
- `parse_table_name` splits `namespace:table`. The namespace defaults to
  `default`.

Tracing (`hbaserpc.observability`):

- `RequestTracePropagator` reads and writes tracing headers in the trace
  info of a `RequestHeader`.

## Example

```python
from hbaserpc.call import RegionInfo
from hbaserpc.get import Get
from hbaserpc.mutate import DurabilityType, delete, durability, put
from hbaserpc.query import families, max_versions

region = RegionInfo(name=b"region")

get = Get(b"table", b"row1", families({"cf": ["a", "b"]}), max_versions(3))
get.region = region
request = get.to_proto()

mutation = put(b"table", b"row1", {"cf": {"a": b"value"}},
               durability(DurabilityType.SKIP_WAL))
mutation.region = region
message, cellblocks, size = mutation.serialize_cell_blocks([])

removal = delete(b"table", b"row1", {"cf": None})
```

Calls addressed to a region need a `region` before `to_proto()` is called.
Assign a `RegionInfo` to the call's `region` attribute. Without one,
`to_proto()` raises `ValueError`.

Errors:

- An option that does not apply to a call, or a value that an option
  rejects, raises `hbaserpc.call.CallOptionError`.
- Malformed cell block data raises `hbaserpc.call.CellBlockError`.

Both are subclasses of `ValueError`.

## What this package does not do

- It opens no network connections and has no client. Nothing here sends
  requests, waits for responses, locates regions or retries calls.
- It does not encode or decode the protobuf wire format. The messages are
  dataclasses, and a transport layer has to serialize them.
- It provides no filter or comparator builders. The one exception is the
  binary comparator that `CheckAndPut` uses internally.
- It records no metrics.

## Running the tests

```
pytest
```