"""HTTP front end that forwards hover and completion requests to a language client."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import urlsplit

from .client import Client, UnsupportedLanguageError, new_client
from .config import DEFAULT_ROOT
from .python_client import ProtocolError

logger = logging.getLogger(__name__)

API_PATH = "/api"
DEFAULT_PORT = 8080
JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class UnknownMethodError(ValueError):
    """Raised for a request method the proxy does not handle."""

    def __init__(self, method: str) -> None:
        super().__init__(f"unknown method: {method}")
        self.method = method


class LanguageProxy:
    """Routes named requests to a language client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def initialize(cls, language: str, workspace_mode: bool = False) -> "LanguageProxy":
        """Create a proxy around a freshly started client for ``language``."""
        return cls(new_client(language, workspace_mode))

    def process_request(self, method: str, params: Any) -> Any:
        """Dispatch ``method`` to the client and return its result."""
        if method == "hover":
            return self.client.hover(params)
        if method == "completion":
            return self.client.completion(params)
        raise UnknownMethodError(method)


def _error(status: HTTPStatus, message: str) -> tuple[int, str, bytes]:
    return int(status), TEXT_CONTENT_TYPE, (message + "\n").encode("utf-8")


def handle_request(proxy: LanguageProxy, body: bytes) -> tuple[int, str, bytes]:
    """Handle one API request body; return status, content type and response body."""
    try:
        request = json.loads(body.decode("utf-8"))
        if not isinstance(request, dict):
            raise ValueError("request must be a JSON object")
        method = request.get("method", "")
        if not isinstance(method, str):
            raise ValueError("method must be a string")
    except (UnicodeDecodeError, ValueError) as exc:
        return _error(HTTPStatus.BAD_REQUEST, f"Failed to parse request: {exc}")

    logger.info("Received request: %s", method)

    try:
        result = proxy.process_request(method, request.get("params"))
    except Exception as exc:
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to process request: {exc}")

    try:
        payload = json.dumps({"result": result}, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to send response: {exc}")
    return int(HTTPStatus.OK), JSON_CONTENT_TYPE, (payload + "\n").encode("utf-8")


def make_handler(proxy: LanguageProxy) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class that serves ``proxy`` on the API path."""

    class _Handler(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            if urlsplit(self.path).path != API_PATH:
                self._reply(*_error(HTTPStatus.NOT_FOUND, "404 page not found"))
                return
            try:
                length = int(self.headers.get("Content-Length") or 0)
            except ValueError:
                length = 0
            body = self.rfile.read(length) if length > 0 else b""
            self._reply(*handle_request(proxy, body))

        do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = _dispatch

        def _reply(self, status: int, content_type: str, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: Any) -> None:
            logger.debug(format, *args)

    return _Handler


def serve(proxy: LanguageProxy, host: str = "", port: int = DEFAULT_PORT) -> None:
    """Serve the proxy over HTTP until interrupted."""
    server = HTTPServer((host, port), make_handler(proxy))
    print(f"Server running on port :{port}...")
    try:
        server.serve_forever()
    finally:
        server.server_close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Forward editor requests to a language server.")
    parser.add_argument("--language", default="python")
    parser.add_argument("--workspace", action="store_true", help="use workspace mode")
    parser.add_argument("--root", default=DEFAULT_ROOT)
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        proxy = LanguageProxy(new_client(args.language, args.workspace, args.root))
    except (ProtocolError, UnsupportedLanguageError, OSError) as exc:
        print(f"Failed to initialize proxy: {exc}", file=sys.stderr)
        return 1

    try:
        serve(proxy, args.host, args.port)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())