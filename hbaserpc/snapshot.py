"""Snapshot calls: take, check, delete, list and restore table snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .call import Call, CallOption, CallOptionError, apply_options
from .messages import AdminResponse


class SnapshotType(IntEnum):
    """How a snapshot is taken."""

    DISABLED = 0
    FLUSH = 1
    SKIPFLUSH = 2


@dataclass
class SnapshotDescription:
    """Description of a snapshot."""

    name: str | None = None
    table: str | None = None
    creation_time: int | None = None
    type: SnapshotType | None = None
    version: int | None = None
    owner: str | None = None


@dataclass
class SnapshotRequest:
    """Request carrying a snapshot description."""

    snapshot: SnapshotDescription | None = None


@dataclass
class GetCompletedSnapshotsRequest:
    """Request listing completed snapshots."""


def _snapshot_of(call: Call, message: str) -> Snapshot:
    if not isinstance(call, Snapshot):
        raise CallOptionError(message)
    return call


def snapshot_version(version: int) -> CallOption:
    """Set the version of the snapshot."""

    def option(call: Call) -> None:
        _snapshot_of(call, "'SnapshotVersion' option can only be used with Snapshot queries")\
            .version = version

    return option


def snapshot_owner(owner: str) -> CallOption:
    """Set the owner of the snapshot."""

    def option(call: Call) -> None:
        _snapshot_of(call, "'SnapshotOwner' option can only be used with Snapshot queries")\
            .owner = owner

    return option


def snapshot_skip_flush() -> CallOption:
    """Do not flush the table before taking the snapshot."""

    def option(call: Call) -> None:
        _snapshot_of(call, "'SnapshotSkipFlush' option can only be used with Snapshot queries")\
            .snapshot_type = SnapshotType.SKIPFLUSH

    return option


class Snapshot(Call):
    """Takes a snapshot named ``name`` of ``table``."""

    def __init__(self, name: str, table: str, *args: CallOption, context: Any = None) -> None:
        super().__init__(table.encode(), None, context=context)
        self.snapshot_name = name
        self.snapshot_table = table
        self.snapshot_type: SnapshotType | None = None
        self.version = 0
        self.owner = ""
        apply_options(self, *args)

    def describe(self) -> SnapshotDescription:
        """The snapshot description sent to the server."""
        return SnapshotDescription(type=self.snapshot_type, table=self.snapshot_table,
                                   name=self.snapshot_name, version=self.version,
                                   owner=self.owner)

    def name(self) -> str:
        return "Snapshot"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> SnapshotRequest:
        return SnapshotRequest(snapshot=self.describe())

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="SnapshotResponse")


def _shared(attr: str) -> property:
    return property(lambda self: getattr(self._snapshot, attr),
                    lambda self, value: setattr(self._snapshot, attr, value),
                    doc=f"The wrapped snapshot's ``{attr}``.")


class _SnapshotCall(Call):
    """A call about an existing snapshot; shares the snapshot's call state."""

    table = _shared("table")
    key = _shared("key")
    context = _shared("context")
    options = _shared("options")
    region = _shared("region")
    skip_batching = _shared("skip_batching")
    result_queue = _shared("result_queue")

    def __init__(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> Snapshot:
        """The snapshot this call is about."""
        return self._snapshot

    def description(self) -> str:
        return self._snapshot.description()

    def to_proto(self) -> SnapshotRequest:
        return self._snapshot.to_proto()


class SnapshotDone(_SnapshotCall):
    """Checks whether a snapshot has been completed."""

    def name(self) -> str:
        return "IsSnapshotDone"

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="IsSnapshotDoneResponse")


class DeleteSnapshot(_SnapshotCall):
    """Deletes a snapshot."""

    def name(self) -> str:
        return "DeleteSnapshot"

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="DeleteSnapshotResponse")


class ListSnapshots(Call):
    """Lists all completed snapshots."""

    def __init__(self, context: Any = None) -> None:
        super().__init__(None, None, context=context)

    def name(self) -> str:
        return "GetCompletedSnapshots"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> GetCompletedSnapshotsRequest:
        return GetCompletedSnapshotsRequest()

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="GetCompletedSnapshotsResponse")


class RestoreSnapshot(_SnapshotCall):
    """Restores a snapshot."""

    def name(self) -> str:
        return "RestoreSnapshot"

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="RestoreSnapshotResponse")


class RestoreSnapshotDone(_SnapshotCall):
    """Checks whether restoring a snapshot has been completed."""

    def name(self) -> str:
        return "IsRestoreSnapshotDone"

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="IsRestoreSnapshotDoneResponse")