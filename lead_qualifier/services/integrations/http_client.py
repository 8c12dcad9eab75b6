"""
HTTP client helper with standardized timeout configuration.

All outbound HTTP calls (SendGrid, OpenAI) go through create_httpx_client so
none of them can hang a request indefinitely.
"""

import httpx


def get_httpx_timeout() -> httpx.Timeout:
    """
    Get standardized timeout configuration for HTTP clients.

    Returns:
        httpx.Timeout with values suited to a chat turn
    """
    return httpx.Timeout(
        15.0,  # Default timeout for all operations
        connect=5.0,  # Time to establish connection
        read=15.0,  # Time to read response (completions can be slow)
        write=5.0,  # Time to write request
        pool=5.0,  # Time to get connection from pool
    )


def create_httpx_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient with standardized timeout configuration.

    Args:
        transport: Optional transport override (tests pass httpx.MockTransport)

    Returns:
        httpx.AsyncClient configured with appropriate timeouts
    """
    return httpx.AsyncClient(timeout=get_httpx_timeout(), transport=transport)
