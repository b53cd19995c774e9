"""Local JSON server shared by the client tests."""

import json
import threading
import time

from collections import Counter
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlparse, parse_qsl

import pytest


class JSONHandler(BaseHTTPRequestHandler):
    """Tiny JSON API.

    - /data: fixed JSON document
    - /echo: echoes method, path, query, headers and JSON body
    - /status/<code>: answers with that status and a JSON error body
    - /empty: 204 with no body
    - /notjson: 200 with a plain-text body
    - /slow: sleeps before answering
    """
    protocol_version = 'HTTP/1.1'

    def log_message(self, format, *args):
        pass

    def _send_json(self, status, obj, extra_headers=None):
        body = json.dumps(obj).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        for name, value in (extra_headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _read_body(self):
        length = int(self.headers.get('Content-Length') or 0)
        return self.rfile.read(length) if length else b''

    def _handle(self):
        parsed = urlparse(self.path)
        self.server.hits[parsed.path] += 1
        raw = self._read_body()

        if parsed.path == '/data':
            self._send_json(200, {'items': [1, 2, 3], 'source': 'local'})
        elif parsed.path == '/echo':
            self._send_json(200, {
                'method': self.command,
                'path': parsed.path,
                'query': dict(parse_qsl(parsed.query)),
                'headers': {k.lower(): v for k, v in self.headers.items()},
                'json': json.loads(raw) if raw else None,
            })
        elif parsed.path.startswith('/status/'):
            code = int(parsed.path.rsplit('/', 1)[1])
            self._send_json(code, {'error': f'status {code}'},
                            {'Retry-After': '7', 'X-Request-ID': 'req-123'})
        elif parsed.path == '/empty':
            self.send_response(204)
            self.end_headers()
        elif parsed.path == '/notjson':
            body = b'hello, not json'
            self.send_response(200)
            self.send_header('Content-Type', 'text/plain')
            self.send_header('Content-Length', str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        elif parsed.path == '/slow':
            time.sleep(1.0)
            self._send_json(200, {'slow': True})
        else:
            self._send_json(404, {'error': 'not found'})

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle
    do_DELETE = _handle


@pytest.fixture(scope='session')
def server():
    """Runs the JSON server on a free localhost port for the whole session."""
    httpd = ThreadingHTTPServer(('127.0.0.1', 0), JSONHandler)
    httpd.daemon_threads = True
    httpd.hits = Counter()
    httpd.base_url = f'http://127.0.0.1:{httpd.server_address[1]}'
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()

@pytest.fixture
def base_url(server):
    server.hits.clear()
    return server.base_url

@pytest.fixture
def dead_url():
    """URL on a port nothing listens on."""
    import socket
    sock = socket.socket()
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return f'http://127.0.0.1:{port}/data'
