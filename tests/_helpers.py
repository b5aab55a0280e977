"""Helper servers and sockets for tests in the http-prober project."""
import socket
import threading
import time
from contextlib import contextmanager
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from .test_globals import RESPONSE_BODY


class BodyHandler(BaseHTTPRequestHandler):
    """Answers every GET with a fixed body."""
    status = 200
    body = RESPONSE_BODY

    def do_GET(self):
        self.send_response(self.status)
        self.send_header('Content-Length', str(len(self.body)))
        self.end_headers()
        self.wfile.write(self.body)

    def log_message(self, format, *args):  # pylint: disable=redefined-builtin
        pass


class NotFoundHandler(BodyHandler):
    status = 404
    body = b'not found'


class StalledBodyHandler(BodyHandler):
    """Sends headers and a few bytes, then stops writing."""

    def do_GET(self):
        self.send_response(200)
        self.send_header('Content-Length', '4096')
        self.end_headers()
        self.wfile.write(b'partial')
        self.wfile.flush()
        time.sleep(2)


@contextmanager
def running_http_server(handler=BodyHandler):
    """Serve handler on a loopback port and yield the port."""
    server = ThreadingHTTPServer(('127.0.0.1', 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.server_address[1]
    finally:
        server.shutdown()
        server.server_close()


@contextmanager
def silent_listener():
    """
    Yield a loopback port that accepts connections
    but never answers a request.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    sock.listen(8)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


def unused_port() -> int:
    """Return a loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]


class TrickleBodyHandler(BodyHandler):
    """Announces a short body and sends it one byte at a time."""
    delay = 0.25

    def do_GET(self):
        body = b'twelve bytes'
        self.send_response(200)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        try:
            for i in range(len(body)):
                self.wfile.write(body[i:i + 1])
                self.wfile.flush()
                time.sleep(self.delay)
        except (BrokenPipeError, ConnectionResetError):
            pass


class TrickleHeadersHandler(BodyHandler):
    """Sends the status line, then one header every quarter second."""
    delay = 0.25

    def do_GET(self):
        try:
            self.wfile.write(b'HTTP/1.0 200 OK\r\n')
            self.wfile.flush()
            for i in range(12):
                time.sleep(self.delay)
                self.wfile.write(f'X-Slow-{i}: {i}\r\n'.encode())
                self.wfile.flush()
            self.wfile.write(b'Content-Length: 2\r\n\r\nok')
        except (BrokenPipeError, ConnectionResetError):
            pass


class RedirectChainHandler(BodyHandler):
    """
    /, /hop/1, ... /hop/<hops-1> each answer 302 to the next hop after
    a delay; /hop/<hops> answers 200.
    """
    hops = 8
    delay = 0.2

    def do_GET(self):
        current = 0 if self.path == '/' else int(self.path.rsplit('/', 1)[-1])
        time.sleep(self.delay)
        try:
            if current < self.hops:
                self.send_response(302)
                self.send_header('Location', f'/hop/{current + 1}')
                self.send_header('Content-Length', '0')
                self.end_headers()
                return
            super().do_GET()
        except (BrokenPipeError, ConnectionResetError):
            pass


class FastRedirectHandler(RedirectChainHandler):
    hops = 2
    delay = 0.0
