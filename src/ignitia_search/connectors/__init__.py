"""Transports and loader for the prebuilt site search index."""

from .base_connector import IndexTransport
from .index_loader import (
    FileTransport,
    HttpTransport,
    IndexLoader,
    make_transport,
    parse_index_payload,
)

__all__ = [
    "FileTransport",
    "HttpTransport",
    "IndexLoader",
    "IndexTransport",
    "make_transport",
    "parse_index_payload",
]
