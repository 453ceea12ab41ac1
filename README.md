# lspbridge

`lspbridge` is a small HTTP service that sits in front of a Pyright language
server. It accepts JSON requests over HTTP and forwards them to
`pyright-langserver --stdio` as `Content-Length` framed JSON-RPC messages.
It then returns the server's answer.

## Requirements

- Python 3.10 or later
- `pyright-langserver` on `PATH`, for example from the `pyright` npm package

## Installation

```
pip install .
```

To install with the test dependencies (pytest):

```
pip install .[test]
```

## Running the server

```
lspbridge
```

On start-up the bridge does the following:

1. It creates the workspace directory, `/app/workspace` by default.
2. In single-file mode, which is the default, it writes a starter `main.py`
   into that directory.
3. It launches Pyright and reads Pyright's two start-up messages.
4. It performs the LSP `initialize` / `initialized` handshake.
5. It prints `Server running on port :8080...` and serves HTTP.

If the client cannot be started, it prints `Failed to initialize proxy: ...`
to standard error and exits with status 1. Examples are an unsupported
language, a failure to create the workspace, or an error talking to Pyright.
Ctrl-C stops the server.

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--language` | `python` | Language of the client to start. Only `python` is supported. |
| `--workspace` | off | Workspace mode: create the directory but write no starter `main.py`. |
| `--root` | `/app/workspace` | Workspace directory. |
| `--host` | all interfaces | Address to bind. |
| `--port` | `8080` | Port to listen on. |

## Making requests

Send a JSON body with a `method` and its `params` to `/api`. Any other path
answers `404`. Two methods are supported: `hover` and `completion`. The
`params` value goes to Pyright unchanged as the params of
`textDocument/hover` or `textDocument/completion`.

```
curl -s -X POST http://localhost:8080/api \
  -d '{"method": "hover",
       "params": {"textDocument": {"uri": "file:///app/workspace/main.py"},
                  "position": {"line": 1, "character": 2}}}'
```

A successful reply is `200` with a JSON body of the form `{"result": ...}`.
That body holds Pyright's response message.

Errors are returned as plain text:

- `400` when the body is not a JSON object, or its `method` is not a string.
- `500` when the method is unknown, when talking to Pyright fails, or when
  the result cannot be encoded.

## Using it from Python

```python
from lspbridge.server import LanguageProxy, serve

proxy = LanguageProxy.initialize("python", False)
serve(proxy, "", 8080)
```

### `lspbridge.config`

- `ClientConfig` is a frozen dataclass with the fields `language`, `root`
  and `workspace_mode`.
- `make_unique_root(workspace_mode, root)` creates the directory and returns
  its path. In single-file mode it also writes the starter `main.py`.

### `lspbridge.client`

- `new_client(language, workspace_mode, root)` prepares the workspace and
  starts a client.
  - Only `"python"` is supported. Any other language raises
    `UnsupportedLanguageError`.
- `Client` is the protocol every client follows: `hover(params)` and
  `completion(params)`.

### `lspbridge.python_client`

`PythonClient` speaks the framed JSON-RPC protocol.

- `PythonClient.start(config)` launches Pyright and performs the handshake.
- `PythonClient(config, reader, writer)` wraps any pair of binary streams.
- `send_message(request)` writes one message.
- `read_response()` reads one message.
  - `window/logMessage` notifications are logged and returned.
  - Any other server-sent method raises `UnexpectedNotificationError`.
  - Malformed frames raise `ProtocolError`.
- `read_responses()` reads every message until end of stream.
- `hover(params)` and `completion(params)` send a request. They keep reading
  until a reply carries the client's session id.
- `close()` closes the streams and stops the process. The client also works
  as a context manager.

### `lspbridge.server`

- `LanguageProxy.process_request(method, params)` dispatches to the client.
  It raises `UnknownMethodError` for other methods.
- `handle_request(proxy, body)` turns a raw request body into a status code,
  a content type and a response body. Use it to embed the bridge in another
  HTTP framework.
- `make_handler(proxy)` builds an `http.server` handler class.
- `serve(proxy, host, port)` runs the server.
- `main(argv)` is the `lspbridge` command.

## What it does not do

- Only Python is supported, through Pyright.
- The bridge sends no document synchronisation notifications such as
  `textDocument/didOpen`. Pyright sees only the files on disk in the
  workspace.
- Every request uses the same session id.
- Requests are handled one at a time by a single-threaded HTTP server.
- Server-to-client requests other than log messages are not answered. Such a
  request ends the current call with an error.