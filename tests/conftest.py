"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Dict, Generator, List, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rofis import FileServer, ServerConfig


def make_tree(root: Path, files: Dict[str, bytes]) -> Path:
    """Create ``files`` (relative path → contents) under ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return root


def split_response(data: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """
    A small document tree:

        site/
        ├── README.md
        ├── docs/v1/guide/index.html
        ├── docs/v2/guide/index.html
        ├── docs/v2/guide/intro.html
        ├── blog/2024/post.txt        (100 bytes)
        ├── src/lib/util.js
        └── .git/objects/secret.txt
    """
    root = tmp_path / "site"
    return make_tree(root, {
        "README.md": b"# readme\n",
        "docs/v1/guide/index.html": b"<h1>v1</h1>",
        "docs/v2/guide/index.html": b"<h1>v2</h1>",
        "docs/v2/guide/intro.html": b"<p>intro</p>",
        "blog/2024/post.txt": b"x" * 100,
        "src/lib/util.js": b"export {};\n",
        ".git/objects/secret.txt": b"hidden",
    })


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class despite the name

    def __init__(self, server: FileServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self, timeout: float = 5.0) -> socket.socket:
        return socket.create_connection(("127.0.0.1", self.port), timeout=timeout)

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw request bytes and read until the server closes."""
        with self.connect(timeout) as sock:
            sock.sendall(raw)
            return read_all(sock)

    def get(self, path: str, method: str = "GET") -> Tuple[str, Dict[str, str], bytes]:
        raw = f"{method} {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode("utf-8")
        return split_response(self.request(raw))


def read_all(sock: socket.socket) -> bytes:
    chunks: List[bytes] = []
    while True:
        chunk = sock.recv(8192)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


@pytest.fixture
def serve(free_port: int) -> Generator[Callable[..., TestServer], None, None]:
    """Factory fixture: ``serve(root, **config)`` starts a server on ``root``."""
    started: List[TestServer] = []

    def _serve(root: Path, **overrides) -> TestServer:
        settings = {
            "host": "127.0.0.1",
            "port": free_port,
            "root_dir": str(root),
            "timeout": 5.0,
            "watch_interval": 0.02,
            "log_level": "WARNING",
        }
        config = ServerConfig(**{**settings, **overrides})
        test_srv = TestServer(FileServer(config), free_port)
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield _serve

    for test_srv in started:
        test_srv.stop()
