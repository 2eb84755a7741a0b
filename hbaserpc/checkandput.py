"""The CheckAndPut call: apply a Put only if a cell holds an expected value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .call import Call, CallOptionError
from .messages import Comparator, CompareType
from .mutate import MutateRequest, MutateResponse, Mutate, MutationType

_BINARY_COMPARATOR = "org.apache.hadoop.hbase.filter.BinaryComparator"


@dataclass
class Condition:
    """The condition a cell must meet for a conditional mutation to apply."""

    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    compare_type: CompareType | None = None
    comparator: Comparator | None = None


def _varint(n: int) -> bytes:
    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _length_delimited(number: int, payload: bytes) -> bytes:
    return _varint(number << 3 | 2) + _varint(len(payload)) + payload


def _binary_comparator(value: bytes | None) -> Comparator:
    comparable = b"" if value is None else _length_delimited(1, value)
    return Comparator(name=_BINARY_COMPARATOR,
                      serialized_comparator=_length_delimited(1, comparable))


def _shared(attr: str) -> property:
    return property(lambda self: getattr(self._put, attr),
                    lambda self, value: setattr(self._put, attr, value),
                    doc=f"The wrapped Put's ``{attr}``.")


class CheckAndPut(Call):
    """Performs a Put if the cell at family:qualifier of its row equals a value."""

    batchable = True

    table = _shared("table")
    key = _shared("key")
    context = _shared("context")
    options = _shared("options")
    region = _shared("region")
    skip_batching = _shared("skip_batching")
    result_queue = _shared("result_queue")

    def __init__(self, put: Mutate, family: str, qualifier: str,
                 expected_value: bytes | None) -> None:
        if put.mutation_type is not MutationType.PUT:
            raise CallOptionError("'CheckAndPut' only takes 'Put' request")
        self._put = put
        self.family = family.encode()
        self.qualifier = qualifier.encode()
        self.comparator = _binary_comparator(expected_value)
        # The multi response carries no "processed" flag, so this is never batched.
        put.skip_batching = True

    @property
    def put(self) -> Mutate:
        """The conditional Put."""
        return self._put

    @property
    def mutation_type(self) -> MutationType:
        return self._put.mutation_type

    def name(self) -> str:
        return self._put.name()

    def description(self) -> str:
        return self._put.description()

    def skip_batch(self) -> bool:
        """Always true: conditional puts are sent right away."""
        return self._put.skip_batch()

    def values(self) -> Any:
        return self._put.values()

    def to_proto(self) -> MutateRequest:
        request = self._put.to_proto()
        request.condition = Condition(
            row=self.key,
            family=self.family,
            qualifier=self.qualifier,
            compare_type=CompareType.EQUAL,
            comparator=self.comparator,
        )
        return request

    def new_response(self) -> MutateResponse:
        return self._put.new_response()

    def deserialize_cell_blocks(self, response: MutateResponse, data: bytes) -> int:
        return self._put.deserialize_cell_blocks(response, data)

    def cell_blocks_enabled(self) -> bool:
        """Cell blocks are not supported for conditional puts."""
        return False