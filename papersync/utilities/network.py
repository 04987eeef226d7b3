"""Network helper utilities for PaperSync.

Small helpers shared by the server entry point (LAN address banner) and the
scanner client (building device base URLs from discovery results).
"""

import socket


def get_local_ip() -> str:
    """Return a non-loopback local IP address if possible, otherwise '127.0.0.1'.

    A UDP socket is "connected" to a public address so the OS picks the
    outgoing interface; no data is sent on the wire.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("8.8.8.8", 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip


def build_base_url(protocol: str, host: str, port: int) -> str:
    """Return ``protocol://host:port``, bracketing bare IPv6 literals."""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"{protocol}://{host}:{port}"
