"""Table administration calls: create, delete, enable and disable tables and namespaces."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .call import Call, parse_table_name
from .messages import AdminResponse, BytesBytesPair, TableName

DEFAULT_FAMILY_ATTRIBUTES: Mapping[str, str] = {
    "BLOOMFILTER": "ROW",
    "VERSIONS": "3",
    "IN_MEMORY": "false",
    "KEEP_DELETED_CELLS": "false",
    "DATA_BLOCK_ENCODING": "FAST_DIFF",
    "TTL": "2147483647",
    "COMPRESSION": "NONE",
    "MIN_VERSIONS": "0",
    "BLOCKCACHE": "true",
    "BLOCKSIZE": "65536",
    "REPLICATION_SCOPE": "0",
}
"""Attributes every created column family gets, unless overridden."""


def _as_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    return value


def _pairs(attrs: Mapping[str, str]) -> list[BytesBytesPair]:
    return [BytesBytesPair(first=k.encode(), second=v.encode()) for k, v in attrs.items()]


@dataclass
class ColumnFamilySchema:
    """Name and attributes of a column family."""

    name: bytes = b""
    attributes: list[BytesBytesPair] = field(default_factory=list)


@dataclass
class TableSchema:
    """Name, attributes and column families of a table."""

    table_name: TableName | None = None
    attributes: list[BytesBytesPair] = field(default_factory=list)
    column_families: list[ColumnFamilySchema] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    """Request creating a table."""

    table_schema: TableSchema | None = None
    split_keys: list[bytes] = field(default_factory=list)


@dataclass
class NamespaceDescriptor:
    """Name and configuration of a namespace."""

    name: bytes = b""
    configuration: list[BytesBytesPair] = field(default_factory=list)


@dataclass
class CreateNamespaceRequest:
    """Request creating a namespace."""

    namespace_descriptor: NamespaceDescriptor | None = None


@dataclass
class TableNameRequest:
    """Request that names a single table (delete, enable or disable)."""

    table_name: TableName | None = None


CreateTableOption = Callable[["CreateTable"], None]


class CreateTable(Call):
    """Creates a table; ``families`` maps each family name to its attributes."""

    def __init__(self, table: str | bytes, families: Mapping[str, Mapping[str, str]],
                 *args: CreateTableOption, context: Any = None) -> None:
        super().__init__(_as_bytes(table), None, context=context)
        self.attributes: Mapping[str, str] = {}
        self.split_keys: Sequence[bytes] = []
        for option in args:
            option(self)
        self.families: dict[str, dict[str, str]] = {
            family: {k: attrs.get(k, default) for k, default in DEFAULT_FAMILY_ATTRIBUTES.items()}
            for family, attrs in families.items()
        }

    def name(self) -> str:
        return "CreateTable"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> CreateTableRequest:
        namespace, table = parse_table_name(self.table or b"")
        return CreateTableRequest(
            table_schema=TableSchema(
                table_name=TableName(namespace=namespace, qualifier=table),
                attributes=_pairs(self.attributes),
                column_families=[
                    ColumnFamilySchema(name=family.encode(), attributes=_pairs(attrs))
                    for family, attrs in self.families.items()
                ],
            ),
            split_keys=list(self.split_keys),
        )

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="CreateTableResponse")


def split_keys(keys: Sequence[bytes]) -> CreateTableOption:
    """Option setting the split keys of the created table."""

    def option(ct: CreateTable) -> None:
        ct.split_keys = keys

    return option


def table_attributes(attrs: Mapping[str, str]) -> CreateTableOption:
    """Option setting attributes on the created table."""

    def option(ct: CreateTable) -> None:
        ct.attributes = attrs

    return option


class CreateNamespace(Call):
    """Creates a namespace."""

    def __init__(self, namespace: str, context: Any = None) -> None:
        super().__init__(None, None, context=context)
        self.namespace = namespace

    def name(self) -> str:
        return "CreateNamespace"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> CreateNamespaceRequest:
        return CreateNamespaceRequest(
            namespace_descriptor=NamespaceDescriptor(name=self.namespace.encode()))

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="CreateNamespaceResponse")


class _NamedTableCall(Call):
    """A call on one table of the default namespace."""

    _call_name = ""

    def __init__(self, table: str | bytes, context: Any = None) -> None:
        super().__init__(_as_bytes(table), None, context=context)

    def name(self) -> str:
        return self._call_name

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> TableNameRequest:
        return TableNameRequest(table_name=TableName(namespace=b"default",
                                                     qualifier=self.table or b""))

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind=f"{self._call_name}Response")


class DeleteTable(_NamedTableCall):
    """Deletes a table."""

    _call_name = "DeleteTable"

    def __init__(self, table: str | bytes, context: Any = None) -> None:
        super().__init__(table, context)

    def name(self) -> str:
        return "DeleteTable"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> TableNameRequest:
        return super().to_proto()

    def new_response(self) -> AdminResponse:
        return super().new_response()


class DisableTable(_NamedTableCall):
    """Disables a table."""

    _call_name = "DisableTable"

    def __init__(self, table: str | bytes, context: Any = None) -> None:
        super().__init__(table, context)

    def name(self) -> str:
        return "DisableTable"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> TableNameRequest:
        return super().to_proto()

    def new_response(self) -> AdminResponse:
        return super().new_response()


class EnableTable(_NamedTableCall):
    """Enables a table."""

    _call_name = "EnableTable"

    def __init__(self, table: str | bytes, context: Any = None) -> None:
        super().__init__(table, context)

    def name(self) -> str:
        return "EnableTable"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> TableNameRequest:
        return super().to_proto()

    def new_response(self) -> AdminResponse:
        return super().new_response()