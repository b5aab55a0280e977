"""
Whole-probe deadline enforcement for requests.

requests only knows per-socket-operation timeouts. The Watchdog tracks every
connection the prober's pool hands out and shuts their sockets down when the
deadline passes, which unblocks whatever read is in progress.
"""

from contextlib import contextmanager
import socket
import threading
import weakref

from requests.adapters import DEFAULT_POOLBLOCK, HTTPAdapter
from urllib3 import HTTPConnectionPool, PoolManager

from http_prober.core.deadline import Deadline


class Watchdog:
    """Aborts in-flight connections once the armed deadline expires."""

    def __init__(self):
        self._lock = threading.Lock()
        self._connections = weakref.WeakSet()
        self.fired = False

    def track(self, conn) -> None:
        with self._lock:
            self._connections.add(conn)
            fired = self.fired
        if fired:
            _abort(conn)

    @contextmanager
    def armed(self, deadline: Deadline):
        """Fire when the deadline expires, unless the block finishes first."""
        with self._lock:
            self.fired = False
            self._connections = weakref.WeakSet()
        timer = threading.Timer(deadline.remaining(), self.fire)
        timer.daemon = True
        timer.start()
        try:
            yield self
        finally:
            timer.cancel()
            with self._lock:
                self._connections = weakref.WeakSet()

    def fire(self) -> None:
        with self._lock:
            self.fired = True
            connections = list(self._connections)
        for conn in connections:
            _abort(conn)


def _abort(conn) -> None:
    sock = getattr(conn, 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # already closed by the owning thread
        pass


class WatchedConnectionPool(HTTPConnectionPool):
    """HTTP pool that reports each connection it hands out to a Watchdog."""
    watchdog = None

    def _get_conn(self, timeout=None):
        conn = super()._get_conn(timeout=timeout)
        if self.watchdog is not None:
            self.watchdog.track(conn)
        return conn


class WatchedPoolManager(PoolManager):

    def __init__(self, watchdog: Watchdog, **kwargs):
        super().__init__(**kwargs)
        self.watchdog = watchdog
        self.pool_classes_by_scheme = dict(self.pool_classes_by_scheme, http=WatchedConnectionPool)

    def _new_pool(self, scheme, host, port, request_context=None):
        pool = super()._new_pool(scheme, host, port, request_context=request_context)
        if isinstance(pool, WatchedConnectionPool):
            pool.watchdog = self.watchdog
        return pool


class WatchedAdapter(HTTPAdapter):
    """HTTPAdapter whose plain-HTTP connections are under a Watchdog."""

    def __init__(self, watchdog: Watchdog, **kwargs):
        # HTTPAdapter.__init__ builds the pool manager, so set this first
        self.watchdog = watchdog
        super().__init__(**kwargs)

    def init_poolmanager(self, connections, maxsize, block=DEFAULT_POOLBLOCK, **pool_kwargs):
        self._pool_connections = connections
        self._pool_maxsize = maxsize
        self._pool_block = block
        self.poolmanager = WatchedPoolManager(
            self.watchdog,
            num_pools=connections,
            maxsize=maxsize,
            block=block,
            **pool_kwargs
        )
