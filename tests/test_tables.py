import pytest

from hbaserpc.messages import BytesBytesPair, TableName
from hbaserpc.tables import (
    DEFAULT_FAMILY_ATTRIBUTES,
    CreateNamespace,
    CreateTable,
    DeleteTable,
    DisableTable,
    EnableTable,
    split_keys,
    table_attributes,
)


def _as_dict(pairs):
    return {p.first.decode(): p.second.decode() for p in pairs}


def test_create_table_default_family_attributes():
    ct = CreateTable("t", {"cf": {}})
    assert ct.families == {"cf": dict(DEFAULT_FAMILY_ATTRIBUTES)}
    assert DEFAULT_FAMILY_ATTRIBUTES["VERSIONS"] == "3"
    assert DEFAULT_FAMILY_ATTRIBUTES["BLOOMFILTER"] == "ROW"


def test_create_table_overrides_and_drops_unknown():
    ct = CreateTable("t", {"cf": {"VERSIONS": "5", "FOO": "x"}})
    attrs = ct.families["cf"]
    assert attrs["VERSIONS"] == "5"
    assert "FOO" not in attrs
    assert set(attrs) == set(DEFAULT_FAMILY_ATTRIBUTES)


def test_create_table_proto_default_namespace():
    ct = CreateTable(b"tbl", {"a": {}, "b": {"TTL": "60"}})
    req = ct.to_proto()
    schema = req.table_schema
    assert schema.table_name == TableName(namespace=b"default", qualifier=b"tbl")
    fams = {cf.name: _as_dict(cf.attributes) for cf in schema.column_families}
    assert set(fams) == {b"a", b"b"}
    assert fams[b"b"]["TTL"] == "60"
    assert fams[b"a"]["TTL"] == "2147483647"
    assert schema.attributes == []
    assert req.split_keys == []


def test_create_table_proto_namespace_split():
    req = CreateTable("ns:tbl", {}).to_proto()
    assert req.table_schema.table_name == TableName(namespace=b"ns", qualifier=b"tbl")
    assert req.table_schema.column_families == []


def test_create_table_options():
    keys = [b"a", b"m", b"z"]
    ct = CreateTable("t", {"cf": {}}, split_keys(keys), table_attributes({"OWNER": "me"}))
    req = ct.to_proto()
    assert req.split_keys == keys
    assert req.table_schema.attributes == [BytesBytesPair(first=b"OWNER", second=b"me")]


def test_create_table_identity():
    ct = CreateTable("t", {}, context="ctx")
    assert ct.name() == "CreateTable"
    assert ct.description() == "CreateTable"
    assert ct.context == "ctx"
    assert ct.table == b"t"
    assert ct.new_response().kind == "CreateTableResponse"


def test_create_namespace():
    cn = CreateNamespace("space")
    assert cn.name() == "CreateNamespace"
    assert cn.description() == "CreateNamespace"
    assert cn.to_proto().namespace_descriptor.name == b"space"
    assert cn.new_response().kind == "CreateNamespaceResponse"


@pytest.mark.parametrize("cls,name", [
    (DeleteTable, "DeleteTable"),
    (DisableTable, "DisableTable"),
    (EnableTable, "EnableTable"),
])
def test_named_table_calls(cls, name):
    call = cls("tbl")
    assert call.name() == name
    assert call.description() == name
    assert call.to_proto().table_name == TableName(namespace=b"default", qualifier=b"tbl")
    assert call.new_response().kind == name + "Response"


@pytest.mark.parametrize("cls", [DeleteTable, DisableTable, EnableTable])
def test_named_table_calls_keep_raw_name(cls):
    req = cls(b"ns:tbl", context="c").to_proto()
    assert req.table_name.namespace == b"default"
    assert req.table_name.qualifier == b"ns:tbl"