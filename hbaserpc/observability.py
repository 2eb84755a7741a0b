"""Propagation of tracing context through RPC request headers."""

from __future__ import annotations

from dataclasses import dataclass

from .messages import RequestHeader, RPCTInfo


@dataclass
class RequestTracePropagator:
    """Text-map carrier storing trace headers in a request header's trace info."""

    request_header: RequestHeader | None = None

    def _headers(self) -> dict[str, str] | None:
        header = self.request_header
        if header is None or header.trace_info is None:
            return None
        return header.trace_info.headers

    def get(self, key: str) -> str:
        """Return the value for ``key``, or an empty string if it is absent."""
        headers = self._headers()
        if headers is None:
            return ""
        return headers.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; does nothing without a request header."""
        header = self.request_header
        if header is None:
            return
        if header.trace_info is None:
            header.trace_info = RPCTInfo(headers={})
        if header.trace_info.headers is None:
            header.trace_info.headers = {}
        header.trace_info.headers[key] = value

    def keys(self) -> list[str]:
        """Return the keys currently stored."""
        headers = self._headers()
        if headers is None:
            return []
        return list(headers)