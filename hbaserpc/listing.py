"""The GetTableNames call: list the tables of a cluster."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .call import Call, CallOption, CallOptionError, apply_options
from .messages import AdminResponse


@dataclass
class GetTableNamesRequest:
    """Request listing table names."""

    regex: str | None = None
    include_sys_tables: bool | None = None
    namespace: str | None = None


class ListTableNames(Call):
    """Lists tables; by default all user tables of every namespace."""

    def __init__(self, *args: CallOption, context: Any = None) -> None:
        super().__init__(None, None, context=context)
        self.regex = ".*"
        self.include_sys_tables = False
        self.namespace = ""
        apply_options(self, *args)

    def name(self) -> str:
        return "GetTableNames"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> GetTableNamesRequest:
        return GetTableNamesRequest(regex=self.regex,
                                    include_sys_tables=self.include_sys_tables,
                                    namespace=self.namespace)

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="GetTableNamesResponse")


def _listing_of(call: Call, message: str) -> ListTableNames:
    if not isinstance(call, ListTableNames):
        raise CallOptionError(message)
    return call


def list_regex(regex: str) -> CallOption:
    """Only list tables whose names match ``regex``."""

    def option(call: Call) -> None:
        _listing_of(call, "ListRegex option can only be used with ListTableNames").regex = regex

    return option


def list_namespace(namespace: str) -> CallOption:
    """Only list tables of ``namespace``."""

    def option(call: Call) -> None:
        _listing_of(call, "ListNamespace option can only be used with ListTableNames")\
            .namespace = namespace

    return option


def list_sys_tables(include: bool) -> CallOption:
    """Include or exclude system tables."""

    def option(call: Call) -> None:
        _listing_of(call, "ListSysTables option can only be used with ListTableNames")\
            .include_sys_tables = include

    return option