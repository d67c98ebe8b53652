# tests/conftest.py

"""
Shared fixtures: a threaded stub line server and a scripted keyboard.
"""

import queue
import socket
import struct
import threading
import time

import pytest

from gameclient import network_utils as net


class StubLineServer:
    """ Accepts one client and handles it according to ``mode``.

    echo  -- records every line and sends it back
    stop  -- sends the "Server stopped" sentinel, then records lines
    close -- closes the connection right after accepting it
    reset -- aborts the connection with a TCP reset
    """

    def __init__(self, mode="echo"):
        self.mode = mode
        self.received = []
        self.finished = threading.Event()
        self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.server_socket.bind(("127.0.0.1", 0))
        self.server_socket.listen(1)
        self.host, self.port = self.server_socket.getsockname()
        self._thread = threading.Thread(target=self._accept_connection, daemon=True)
        self._thread.start()

    def _accept_connection(self):
        try:
            conn, _ = self.server_socket.accept()
        except OSError:
            return # Server socket closed before a client arrived
        try:
            if self.mode == "reset":
                conn.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
            with conn:
                if self.mode not in ("close", "reset"):
                    self._handle_client(conn)
        finally:
            self.finished.set()

    def _handle_client(self, conn):
        reader = conn.makefile('r', encoding=net.ENCODING, newline='\n')
        writer = conn.makefile('w', encoding=net.ENCODING, newline='\n')
        try:
            if self.mode == "stop":
                writer.write(net.SERVER_STOPPED + "\n")
                writer.flush()
            for line in reader:
                line = line.rstrip("\r\n")
                self.received.append(line)
                if self.mode == "echo":
                    writer.write(line + "\n")
                    writer.flush()
        except OSError:
            pass # Client went away mid-write
        finally:
            reader.close()
            try:
                writer.close()
            except OSError:
                pass

    def close(self):
        self.server_socket.close()


class ScriptedInput:
    """ Keyboard stand-in whose readline blocks until a line is fed."""

    def __init__(self):
        self._lines = queue.Queue()

    def feed(self, line):
        self._lines.put(line + "\n")

    def end(self):
        self._lines.put("")

    def readline(self):
        return self._lines.get(timeout=5)


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def line_server():
    servers = []

    def make(mode="echo"):
        server = StubLineServer(mode)
        servers.append(server)
        return server

    yield make
    for server in servers:
        server.close()


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
