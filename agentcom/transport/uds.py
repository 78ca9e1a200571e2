"""Newline-delimited JSON over Unix domain sockets."""

from __future__ import annotations

import codecs
import json
import logging
import os
import re
import socket
import threading
from collections.abc import Callable, Iterator

log = logging.getLogger(__name__)

CLIENT_DIAL_TIMEOUT = 5.0
CLIENT_WRITE_TIMEOUT = 5.0
STALE_DIAL_TIMEOUT = 1.0
_POLL_INTERVAL = 0.1
_WHITESPACE = re.compile(r"[ \t\n\r]*")
_LITERALS = ("true", "false", "null")

MessageHandler = Callable[[bytes], None]


class TransportError(OSError):
    """Raised when a socket operation fails."""


class SendCancelledError(TransportError):
    """Raised when a send is cancelled before it could complete."""


class _JsonStream:
    """Splits a byte stream into consecutive JSON values."""

    def __init__(self) -> None:
        self._text = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._decoder = json.JSONDecoder()

    def feed(self, chunk: bytes, final: bool = False) -> Iterator[bytes]:
        """Yield the raw bytes of each complete value; raise ValueError on bad input."""
        self._buffer += self._text.decode(chunk, final)
        while True:
            start = _WHITESPACE.match(self._buffer).end()
            rest = self._buffer[start:]
            if not rest:
                self._buffer = ""
                return
            try:
                _, end = self._decoder.raw_decode(self._buffer, start)
            except json.JSONDecodeError as exc:
                if final or not self._incomplete(exc, rest):
                    raise
                self._buffer = rest
                return
            if end == len(self._buffer) and not final and rest[0] in "-0123456789":
                self._buffer = rest
                return
            yield self._buffer[start:end].encode("utf-8")
            self._buffer = self._buffer[end:]

    def _incomplete(self, exc: json.JSONDecodeError, rest: str) -> bool:
        if exc.pos >= len(exc.doc) or exc.msg.startswith("Unterminated string"):
            return True
        return any(literal.startswith(rest) for literal in _LITERALS)


class UDSServer:
    """Accepts connections on a socket path and passes each JSON value to a handler."""

    def __init__(self, socket_path: str, handler: MessageHandler | None = None) -> None:
        self.socket_path = socket_path
        self._handler = handler
        self._lock = threading.Lock()
        self._listener: socket.socket | None = None
        self._stopped = threading.Event()
        self._accept_thread: threading.Thread | None = None

    def __enter__(self) -> UDSServer:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def start(self) -> None:
        """Remove a stale socket file, bind and start accepting in the background."""
        self._cleanup_stale_socket()
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(self.socket_path)
            sock.listen()
        except OSError as exc:
            sock.close()
            raise TransportError(f"listen on {self.socket_path}: {exc}") from exc
        sock.settimeout(_POLL_INTERVAL)

        stopped = threading.Event()
        thread = threading.Thread(
            target=self._accept_loop, args=(sock, stopped), daemon=True
        )
        with self._lock:
            self._listener = sock
            self._stopped = stopped
            self._accept_thread = thread
        thread.start()

    def stop(self) -> None:
        """Close the listener and remove the socket file."""
        with self._lock:
            listener, self._listener = self._listener, None
            thread, self._accept_thread = self._accept_thread, None
            self._stopped.set()
        if listener is not None:
            listener.close()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        try:
            os.remove(self.socket_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise TransportError(f"remove socket: {exc}") from exc

    def _cleanup_stale_socket(self) -> None:
        probe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        probe.settimeout(STALE_DIAL_TIMEOUT)
        try:
            probe.connect(self.socket_path)
        except FileNotFoundError:
            return
        except ConnectionRefusedError:
            try:
                os.remove(self.socket_path)
            except FileNotFoundError:
                pass
            except OSError as exc:
                raise TransportError(f"remove stale socket: {exc}") from exc
            return
        except OSError as exc:
            try:
                os.stat(self.socket_path)
            except FileNotFoundError:
                return
            except OSError as stat_exc:
                raise TransportError(f"stat socket path: {stat_exc}") from stat_exc
            raise TransportError(f"dial existing socket: {exc}") from exc
        finally:
            probe.close()
        raise TransportError(f"socket already active: {self.socket_path}")

    def _accept_loop(self, sock: socket.socket, stopped: threading.Event) -> None:
        while not stopped.is_set():
            try:
                conn, _ = sock.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if stopped.is_set():
                    return
                log.error("failed to accept UDS connection socket_path=%s error=%s", self.socket_path, exc)
                continue
            threading.Thread(
                target=self._serve_connection, args=(conn, stopped), daemon=True
            ).start()

    def _serve_connection(self, conn: socket.socket, stopped: threading.Event) -> None:
        stream = _JsonStream()
        with conn:
            conn.settimeout(_POLL_INTERVAL)
            while not stopped.is_set():
                try:
                    chunk = conn.recv(65536)
                except socket.timeout:
                    continue
                except OSError as exc:
                    log.error("failed to read UDS payload socket_path=%s error=%s", self.socket_path, exc)
                    return
                final = not chunk
                try:
                    for value in stream.feed(chunk, final=final):
                        if stopped.is_set():
                            return
                        if self._handler is not None:
                            self._handler(value)
                except ValueError as exc:
                    log.error("failed to decode UDS payload socket_path=%s error=%s", self.socket_path, exc)
                    return
                if final:
                    return


class UDSClient:
    """Sends one newline-terminated payload per connection, retrying once."""

    def __init__(
        self,
        dial_timeout: float = CLIENT_DIAL_TIMEOUT,
        write_timeout: float = CLIENT_WRITE_TIMEOUT,
    ) -> None:
        self._dial_timeout = dial_timeout
        self._write_timeout = write_timeout

    def send(
        self,
        socket_path: str,
        data: bytes | str,
        cancelled: threading.Event | None = None,
    ) -> None:
        """Deliver data to the socket; raise TransportError after two failures."""
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        last_error: OSError | None = None
        for attempt in (1, 2):
            if cancelled is not None and cancelled.is_set():
                raise SendCancelledError(f"send to {socket_path} cancelled")
            try:
                self._send_once(socket_path, payload)
            except OSError as exc:
                last_error = exc
                if attempt == 1:
                    log.debug("retrying UDS send socket_path=%s error=%s", socket_path, exc)
                continue
            return
        raise TransportError(f"send to {socket_path}: {last_error}") from last_error

    def _send_once(self, socket_path: str, payload: bytes) -> None:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as conn:
            conn.settimeout(self._dial_timeout)
            conn.connect(socket_path)
            conn.settimeout(self._write_timeout)
            conn.sendall(payload + b"\n")