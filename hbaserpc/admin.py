"""Cluster administration calls: balancer, region moves, procedures and status."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .call import Call, CallOption, CallOptionError, apply_options
from .messages import AdminResponse, RegionSpecifier, RegionSpecifierType, ServerName

_DIGITS = re.compile(r"[0-9]+", re.ASCII)


@dataclass
class SetBalancerRunningRequest:
    """Request switching the balancer on or off."""

    on: bool | None = None
    synchronous: bool | None = None


@dataclass
class MoveRegionRequest:
    """Request moving a region, optionally to a given region server."""

    region: RegionSpecifier | None = None
    dest_server_name: ServerName | None = None


@dataclass
class GetProcedureResultRequest:
    """Request asking for the state of a procedure."""

    proc_id: int | None = None


@dataclass
class GetClusterStatusRequest:
    """Request asking for the cluster status."""


class SetBalancer(Call):
    """Enables or disables the balancer."""

    def __init__(self, enabled: bool, context: Any = None) -> None:
        super().__init__(None, None, context=context)
        self.request = SetBalancerRunningRequest(on=enabled)

    def name(self) -> str:
        return "SetBalancerRunning"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> SetBalancerRunningRequest:
        return self.request

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="SetBalancerRunningResponse")


def _parse_unsigned(text: str, bits: int, what: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise CallOptionError(f"failed to parse {what}: invalid syntax in {text!r}")
    value = int(text)
    if value >= 1 << bits:
        raise CallOptionError(f"failed to parse {what}: value out of range in {text!r}")
    return value


def with_destination_region_server(server_name: str) -> CallOption:
    """Move the region to the server named ``<host>,<port>,<startcode>``."""

    def option(call: Call) -> None:
        if not isinstance(call, MoveRegion):
            raise CallOptionError(
                "WithDestinationRegionServer option can only be used with MoveRegion")
        parts = server_name.split(",", 2)
        if len(parts) != 3:
            raise CallOptionError(
                "invalid server name, needs to be of format <host>,<port>,<startcode>")
        host, port_text, start_code_text = parts
        port = _parse_unsigned(port_text, 32, "port")
        start_code = _parse_unsigned(start_code_text, 64, "startcode")
        call.request.dest_server_name = ServerName(host_name=host, port=port,
                                                   start_code=start_code)

    return option


class MoveRegion(Call):
    """Moves a region, given by its encoded name, to another region server."""

    def __init__(self, region_name: bytes, *args: CallOption, context: Any = None) -> None:
        super().__init__(None, None, context=context)
        self.request = MoveRegionRequest(
            region=RegionSpecifier(type=RegionSpecifierType.ENCODED_REGION_NAME,
                                   value=region_name))
        apply_options(self, *args)

    def name(self) -> str:
        return "MoveRegion"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> MoveRegionRequest:
        return self.request

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="MoveRegionResponse")


class GetProcedureState(Call):
    """Asks for the state of a procedure."""

    def __init__(self, proc_id: int, context: Any = None) -> None:
        super().__init__(None, None, context=context)
        self.proc_id = proc_id

    def name(self) -> str:
        return "getProcedureResult"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> GetProcedureResultRequest:
        return GetProcedureResultRequest(proc_id=self.proc_id)

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="GetProcedureResultResponse")


class ClusterStatus(Call):
    """Asks for the cluster status."""

    def __init__(self) -> None:
        super().__init__(b"", None)

    def name(self) -> str:
        return "GetClusterStatus"

    def description(self) -> str:
        return self.name()

    def to_proto(self) -> GetClusterStatusRequest:
        return GetClusterStatusRequest()

    def new_response(self) -> AdminResponse:
        return AdminResponse(kind="GetClusterStatusResponse")