"""
Low-level components: the directory suffix index, the TCP accept loop and
the per-client connection wrapper.
"""

from .suffix_index import SuffixIndex
from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = ["SuffixIndex", "Connection", "ConnectionState", "SocketServer"]
