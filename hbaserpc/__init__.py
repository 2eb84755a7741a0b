"""Request objects, options and cell block decoding for HBase RPC calls."""

__version__ = "0.1.0"

__all__ = [
    "admin",
    "call",
    "checkandput",
    "get",
    "listing",
    "messages",
    "mutate",
    "observability",
    "query",
    "scan",
    "snapshot",
    "tables",
]