# gameclient/client.py

"""
The interactive line-relay client for the game server.
"""

import socket
import sys
import threading
import logging
from . import network_utils as net

# Configure logging for client-side messages
logging.basicConfig(level=logging.INFO, format='%(message)s') # Simpler format for client

class GameClient:
    def __init__(self, host, port, stdin=None, stdout=None):
        self.host = host
        self.port = port
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.client_socket = None
        self.reader = None
        self.writer = None
        self.listener_thread = None
        # Liveness flag shared by the input loop and the listener thread
        self._running = threading.Event()
        self._close_lock = threading.Lock()
        self._closed = False

    @property
    def running(self):
        return self._running.is_set()

    def _print(self, text):
        print(text, file=self.stdout, flush=True)

    def connect(self):
        """ Opens the connection and the line reader/writer over it."""
        if self.client_socket is not None:
            logging.error("Cannot connect: this client already had a session.")
            return False
        # A shutdown() before any session must not swallow this session's teardown
        with self._close_lock:
            self._closed = False

        try:
            self.client_socket = socket.create_connection((self.host, self.port))
            self.reader, self.writer = net.open_streams(self.client_socket)
        except ConnectionRefusedError:
            logging.error("Error connecting to server: connection refused. Is the server running?")
            self._discard_socket()
            return False
        except socket.gaierror as e:
            logging.error(f"Error connecting to server: cannot resolve '{self.host}': {e}")
            self._discard_socket()
            return False
        except OSError as e:
            logging.error(f"Error connecting to server: {e}")
            self._discard_socket()
            return False

        self._print(f"Connected to server at {self.host}:{self.port}")
        self._running.set()
        return True

    def _discard_socket(self):
        if self.client_socket:
            self.client_socket.close()
        self.client_socket = None

    def listen(self):
        """ Target function for the thread that prints server responses."""
        try:
            while self.running:
                line = net.recv_line(self.reader)
                if line is None or not self.running:
                    break # Server closed the connection or we are shutting down

                self._print(f"Server: {line}")

                if line == net.SERVER_STOPPED:
                    self._running.clear()
                    self._print("Server has stopped. Exiting...")
                    break
        except net.TransportError as e:
            if self.running: # Errors after the flag is cleared come from our own shutdown
                logging.error(f"Lost connection to server: {e}")
        finally:
            self.shutdown()

    def _send(self, line: str):
        try:
            net.send_line(self.writer, line)
            return True
        except net.TransportError as e:
            if self.running:
                logging.error(f"Lost connection to server: {e}")
            return False

    def run(self):
        """ Forwards keyboard lines to the server until exit, EOF or disconnect."""
        if not self.running:
            logging.error("Cannot start the input loop: not connected to a server.")
            return

        self.listener_thread = threading.Thread(target=self.listen, daemon=True)
        self.listener_thread.start()

        self._print(f"Enter commands (type '{net.EXIT_COMMAND}' to quit):")
        try:
            while self.running:
                command = self.stdin.readline()
                if not command:
                    break # End of input
                if not self.running:
                    break # Listener stopped the session while we were waiting

                command = command.rstrip("\r\n")
                if command.lower() == net.EXIT_COMMAND:
                    self._send(net.EXIT_COMMAND)
                    break

                if not self._send(command):
                    break
        except KeyboardInterrupt:
            logging.info("Ctrl+C detected. Disconnecting...")
            if self.running:
                self._send(net.EXIT_COMMAND)
        finally:
            self.shutdown()
            if self.listener_thread.is_alive():
                self.listener_thread.join(timeout=1.0)

    def start(self):
        """ Connects and starts the input loop."""
        if self.connect():
            self.run()

    def shutdown(self):
        """ Stops both loops and closes all resources. Safe to call more than once."""
        self._running.clear()
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        if self.client_socket:
            # Wakes up a listener blocked in readline
            try:
                self.client_socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass # Peer already disconnected

        for resource in (self.writer, self.reader, self.client_socket):
            if resource is None:
                continue
            try:
                resource.close()
            except OSError as e:
                logging.error(f"Error closing client resources: {e}")

        self._print("Disconnected from server.")
