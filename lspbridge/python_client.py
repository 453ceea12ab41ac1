"""Language client that talks JSON-RPC to the Pyright language server."""

from __future__ import annotations

import json
import logging
import posixpath
import subprocess
import uuid
from typing import Any, BinaryIO

from .config import ClientConfig

logger = logging.getLogger(__name__)

SERVER_COMMAND = ("pyright-langserver", "--stdio")
LOG_MESSAGE_METHOD = "window/logMessage"
_HEADER_PREFIX = b"Content-Length: "


class ProtocolError(RuntimeError):
    """Raised when the language server conversation fails."""


class UnexpectedNotificationError(ProtocolError):
    """Raised when the server sends a notification other than a log message."""

    def __init__(self, method: str, response: dict[str, Any]) -> None:
        super().__init__(f"unexpected notification method: {method}")
        self.method = method
        self.response = response


def _workspace_uri(root: str) -> str:
    return posixpath.normpath("file:///" + root)


class PythonClient:
    """A client for Python source, backed by Pyright over stdio."""

    def __init__(
        self,
        config: ClientConfig,
        reader: BinaryIO,
        writer: BinaryIO,
        process: subprocess.Popen | None = None,
    ) -> None:
        self.config = config
        self.session_id = str(uuid.uuid4())
        self._reader = reader
        self._writer = writer
        self._process = process

    @classmethod
    def start(cls, config: ClientConfig) -> "PythonClient":
        """Launch Pyright, consume its startup messages and initialize it."""
        try:
            process = subprocess.Popen(
                list(SERVER_COMMAND), stdin=subprocess.PIPE, stdout=subprocess.PIPE
            )
        except OSError as exc:
            raise ProtocolError(f"failed to start Pyright: {exc}") from exc

        client = cls(config, process.stdout, process.stdin, process)
        try:
            for _ in range(2):
                try:
                    client.read_response()
                except ProtocolError as exc:
                    raise ProtocolError(f"failed to read startup message: {exc}") from exc
            logger.info("Root URI: %s", config.root)
            client.initialize_pyright()
        except BaseException:
            client.close()
            raise
        return client

    def __enter__(self) -> "PythonClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def initialize_pyright(self) -> dict[str, Any]:
        """Perform the initialize handshake and return the server's capabilities message."""
        workspace_root = _workspace_uri(self.config.root)
        logger.info("Workspace root: %s", workspace_root)

        init_request = {
            "jsonrpc": "2.0",
            "id": self.session_id,
            "method": "initialize",
            "params": {
                # Left unset so the server is not tied to this process's lifetime.
                "processId": None,
                "capabilities": {
                    "textDocument": {
                        "completion": {"dynamicRegistration": True},
                        "hover": {"dynamicRegistration": True},
                    },
                },
                "workspaceFolders": [
                    {"uri": workspace_root, "name": "Workspace Folder"},
                ],
            },
        }
        try:
            self.send_message(init_request)
        except ProtocolError as exc:
            raise ProtocolError(f"failed to send initialize request: {exc}") from exc

        try:
            starting_instance = self.read_response()
            logger.info("Log message: %r", starting_instance)
            capabilities = self.read_response()
        except ProtocolError as exc:
            raise ProtocolError(f"failed to read response: {exc}") from exc
        logger.info("LS capabilities: %r", capabilities)

        try:
            self.send_message({"method": "initialized", "params": {}})
        except ProtocolError as exc:
            raise ProtocolError(f"failed to send initialized notification: {exc}") from exc
        return capabilities

    def send_message(self, request: dict[str, Any]) -> None:
        """Write one JSON-RPC message framed with a Content-Length header."""
        try:
            payload = json.dumps(
                request, sort_keys=True, separators=(",", ":"), ensure_ascii=False
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ProtocolError(f"failed to encode request: {exc}") from exc

        message = b"Content-Length: %d\r\n\r\n" % len(payload) + payload
        try:
            self._writer.write(message)
            self._writer.flush()
        except (OSError, ValueError) as exc:
            raise ProtocolError(f"failed to write message: {exc}") from exc

    def _read_frame(self, *, eof_ok: bool) -> dict[str, Any] | None:
        line = self._reader.readline()
        if not line:
            if eof_ok:
                return None
            raise ProtocolError("failed to read content length header: EOF")
        if not line.startswith(_HEADER_PREFIX):
            raise ProtocolError(f"failed to read content length header: {line!r}")

        value = line[len(_HEADER_PREFIX):].strip()
        try:
            length = int(value)
        except ValueError as exc:
            raise ProtocolError(f"failed to parse content length: {value!r}") from exc
        if length < 0:
            raise ProtocolError(f"failed to parse content length: {value!r}")

        if self._reader.readline().strip():
            raise ProtocolError("failed to read content length header: missing blank line")

        body = self._reader.read(length)
        if eof_ok and length and not body:
            return None
        if len(body) != length:
            raise ProtocolError(
                f"failed to read response: expected {length} bytes, got {len(body)}"
            )

        try:
            response = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProtocolError(f"failed to decode response: {exc}") from exc
        if not isinstance(response, dict):
            raise ProtocolError("failed to decode response: not a JSON object")
        return response

    def read_response(self) -> dict[str, Any]:
        """Read one message; log messages are reported, other notifications raise."""
        response = self._read_frame(eof_ok=False)
        assert response is not None
        method = response.get("method")
        if isinstance(method, str):
            if method != LOG_MESSAGE_METHOD:
                raise UnexpectedNotificationError(method, response)
            params = response.get("params")
            if isinstance(params, dict) and isinstance(params.get("message"), str):
                logger.info("Log message: %s", params["message"])
        return response

    def read_responses(self) -> list[dict[str, Any]]:
        """Read every remaining message until the stream ends."""
        responses = []
        while (response := self._read_frame(eof_ok=True)) is not None:
            responses.append(response)
        return responses

    def _request(self, method: str, params: Any, action: str) -> dict[str, Any]:
        request = {
            "jsonrpc": "2.0",
            "id": self.session_id,
            "method": method,
            "params": params,
        }
        try:
            self.send_message(request)
        except ProtocolError as exc:
            raise ProtocolError(f"failed to send {action} request: {exc}") from exc

        while True:
            try:
                response = self.read_response()
            except ProtocolError as exc:
                raise ProtocolError(
                    f"failed to receive response to {action} request: {exc}"
                ) from exc
            if response.get("id") == self.session_id:
                return response

    def hover(self, params: Any) -> dict[str, Any]:
        """Send a textDocument/hover request and return the server's reply."""
        logger.debug("Hover params: %r", params)
        return self._request("textDocument/hover", params, "hover")

    def completion(self, params: Any) -> dict[str, Any]:
        """Send a textDocument/completion request and return the server's reply."""
        return self._request("textDocument/completion", params, "completion")

    def close(self) -> None:
        """Close the streams and stop the server process if one was started."""
        for stream in (self._writer, self._reader):
            if stream is None:
                continue
            try:
                stream.close()
            except OSError:
                pass
        process, self._process = self._process, None
        if process is not None and process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()