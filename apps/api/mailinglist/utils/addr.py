"""Service address helpers.

The service endpoint is configured as a single string shared by the
server and the client:
- ":8081" -> all interfaces for the server, localhost for the client
- "host:8081" -> explicit host and port
- "http://host:8081" -> full base URL (client only)
"""

DEFAULT_PORT = 8081


def parse_api_addr(addr: str, default_host: str = "0.0.0.0") -> tuple[str, int]:
    """Split an address string into host and port.

    Args:
        addr: Address such as ":8081", "localhost:8081" or "http://host:8081"
        default_host: Host used when the address omits one

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the port is not an integer
    """
    value = addr.strip()
    if "://" in value:
        value = value.split("://", 1)[1]
    value = value.split("/", 1)[0]

    if not value:
        return default_host, DEFAULT_PORT

    host, sep, port = value.rpartition(":")
    if not sep:
        # No colon at all: the whole value is a host name
        return value, DEFAULT_PORT

    if not port.isdigit():
        raise ValueError(f"Invalid port in address: {addr!r}")

    return host or default_host, int(port)


def base_url_from_addr(addr: str) -> str:
    """Build the HTTP base URL a client should use for an address.

    Args:
        addr: Configured service address

    Returns:
        Base URL without trailing slash
    """
    value = addr.strip()
    if value.startswith(("http://", "https://")):
        return value.rstrip("/")

    host, port = parse_api_addr(value, default_host="127.0.0.1")
    return f"http://{host}:{port}"
