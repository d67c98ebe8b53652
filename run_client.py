# run_client.py

"""
Starts the game server text client.
"""

import argparse
import logging
import re
from gameclient.client import GameClient
from gameclient import network_utils as net

def parse_port(value):
    """ Converts the port argument, falling back to the default on bad input."""
    port = None
    if isinstance(value, str) and re.fullmatch(r"\+?[0-9]+", value):
        port = int(value)
    if port is None or not 0 < port < 65536:
        logging.warning(f"Invalid port number. Using default port {net.DEFAULT_PORT}.")
        return net.DEFAULT_PORT
    return port

def main(argv=None):
    parser = argparse.ArgumentParser(description="Game server text client")
    parser.add_argument(
        'host',
        nargs='?',
        default=net.DEFAULT_HOST,
        help=f"Server host address/IP to connect to (default: {net.DEFAULT_HOST})"
    )
    parser.add_argument(
        'port',
        nargs='?',
        default=str(net.DEFAULT_PORT),
        help=f"Server port number (default: {net.DEFAULT_PORT})"
    )
    args = parser.parse_args(argv)

    client = GameClient(host=args.host, port=parse_port(args.port))
    client.start() # Connects, then relays lines until either side stops

if __name__ == "__main__":
    main()
