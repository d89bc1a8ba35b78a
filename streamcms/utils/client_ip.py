from fastapi import Request

DEFAULT_CLIENT_IP = "127.0.0.1"


def get_client_ip(request: Request) -> str:
    """
    Best-effort client IP for moderation records.

    Checks proxy headers in order (first hop of X-Forwarded-For, X-Real-IP,
    CF-Connecting-IP) before falling back to the loopback address.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    return (
        request.headers.get("X-Real-IP")
        or request.headers.get("CF-Connecting-IP")
        or DEFAULT_CLIENT_IP
    )
