# gameclient/network_utils.py

"""
Provides utility functions for sending and receiving
newline-delimited text lines over sockets.
"""

import socket

ENCODING = "utf-8"

# Sentinel lines with protocol meaning
EXIT_COMMAND = "exit"
SERVER_STOPPED = "Server stopped"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8099


class TransportError(ConnectionError):
    """ Raised when reading or writing a line fails mid-session."""


def open_streams(sock: socket.socket):
    """ Creates the text reader and writer views over a connected socket."""
    reader = sock.makefile('r', encoding=ENCODING, errors='replace', newline='\n')
    writer = sock.makefile('w', encoding=ENCODING, newline='\n')
    return reader, writer


def send_line(writer, line: str):
    """ Writes one line and flushes it to the socket."""
    try:
        writer.write(line + "\n")
        writer.flush()
    except (BrokenPipeError, OSError) as e:
        raise TransportError(f"Failed to send line: {e}") from e
    except ValueError as e: # Writer already closed by shutdown
        raise TransportError("Connection is closed") from e


def recv_line(reader) -> str | None:
    """ Reads one line without its terminator. Returns None at end of stream."""
    try:
        line = reader.readline()
    except (ConnectionResetError, OSError) as e:
        raise TransportError(f"Failed to receive line: {e}") from e
    except ValueError as e: # Reader already closed by shutdown
        raise TransportError("Connection is closed") from e

    if not line:
        return None # Connection closed
    return line.rstrip("\r\n")
