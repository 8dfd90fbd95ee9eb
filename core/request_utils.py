# core/request_utils.py
from typing import Optional

from fastapi import Request

UNKNOWN_IP = "unknown"


def get_client_ip(request: Request) -> str:
    """
    Best-effort client address for audit entries.
    Behind a proxy the first X-Forwarded-For hop is the original client.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45]
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP


def get_user_agent(request: Request) -> Optional[str]:
    agent = request.headers.get("user-agent")
    return agent[:500] if agent else None
