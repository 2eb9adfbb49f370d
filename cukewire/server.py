"""Socket servers that answer wire protocol requests one line at a time."""

from __future__ import annotations

import contextlib
import errno
import ipaddress
import os
import socket
import stat
from typing import Any, Protocol, TextIO


class _Handler(Protocol):
    def handle(self, request: str) -> str: ...


class _SocketStream:
    """Reads lines from one file and writes replies to another, over one socket."""

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer

    def __iter__(self):
        return iter(self._reader)

    def write(self, text: str) -> int:
        return self._writer.write(text)

    def flush(self) -> None:
        self._writer.flush()


class SocketServer:
    """Listens on a socket and serves a single client connection at a time."""

    def __init__(self, protocol_handler: _Handler) -> None:
        self.protocol_handler = protocol_handler
        self._acceptor: socket.socket | None = None

    def _do_listen(self, family: int, address: Any) -> socket.socket:
        if self._acceptor is not None:
            raise OSError(errno.EALREADY, "Already open")
        acceptor = socket.socket(family, socket.SOCK_STREAM)
        try:
            acceptor.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            acceptor.bind(address)
            acceptor.listen(1)
        except BaseException:
            acceptor.close()
            raise
        self._acceptor = acceptor
        return acceptor

    def _listening(self) -> socket.socket:
        if self._acceptor is None:
            raise OSError(errno.EBADF, "Not listening")
        return self._acceptor

    def _configure_connection(self, connection: socket.socket) -> None:
        """Adjust an accepted connection before it is served."""

    def process_stream(self, stream: Any) -> None:
        """Answer each line read from ``stream`` with one line written back."""
        for line in stream:
            request = line[:-1] if line.endswith("\n") else line
            stream.write(self.protocol_handler.handle(request) + "\n")
            stream.flush()

    def accept_once(self) -> None:
        """Accept one client and serve it until it disconnects."""
        connection, _ = self._listening().accept()
        with connection, contextlib.suppress(ConnectionError):
            self._configure_connection(connection)
            options = {"encoding": "utf-8", "errors": "surrogateescape", "newline": ""}
            with connection.makefile("r", **options) as reader, connection.makefile(
                "w", **options
            ) as writer:
                self.process_stream(_SocketStream(reader, writer))

    def close(self) -> None:
        if self._acceptor is not None:
            self._acceptor.close()
            self._acceptor = None

    def __enter__(self) -> SocketServer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TCPSocketServer(SocketServer):
    """Serves over TCP."""

    def listen(self, host: str, port: int) -> None:
        """Listen on an IP address and port; port 0 picks an ephemeral port."""
        address = ipaddress.ip_address(host)
        family = socket.AF_INET6 if address.version == 6 else socket.AF_INET
        acceptor = self._do_listen(family, (str(address), port))
        acceptor.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

    def listen_endpoint(self) -> tuple[Any, ...]:
        return self._listening().getsockname()

    def _configure_connection(self, connection: socket.socket) -> None:
        connection.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


class UnixSocketServer(SocketServer):
    """Serves over a Unix domain socket, removing its socket file on close."""

    def listen(self, unix_path: str) -> None:
        """Listen at a path, replacing a stale socket file left there."""
        with contextlib.suppress(FileNotFoundError):
            if stat.S_ISSOCK(os.stat(unix_path).st_mode):
                os.remove(unix_path)
        self._do_listen(socket.AF_UNIX, unix_path)

    def listen_endpoint(self) -> str:
        return self._listening().getsockname()

    def close(self) -> None:
        if self._acceptor is None:
            return
        path = self._acceptor.getsockname()
        super().close()
        if isinstance(path, str) and path and not path.startswith("\0"):
            with contextlib.suppress(FileNotFoundError):
                os.remove(path)