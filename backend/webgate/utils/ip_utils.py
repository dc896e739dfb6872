"""
IP Utilities

Client address extraction for request and audit logs.

Security:
- X-Forwarded-For is only trusted when the direct peer is a configured proxy
"""
import ipaddress
import logging
from typing import Iterable
from fastapi import Request

from webgate.configuration import get_settings

logger = logging.getLogger(__name__)


def _is_trusted_proxy(ip: str, trusted: Iterable[str]) -> bool:
    """
    Check if an IP address belongs to a trusted proxy.

    Args:
        ip: IP address to check
        trusted: IP addresses or CIDR ranges

    Returns:
        True if IP is in the trusted list
    """
    if not ip:
        return False

    try:
        client_addr = ipaddress.ip_address(ip)
    except ValueError:
        return False

    for proxy in trusted:
        try:
            if "/" in proxy:
                if client_addr in ipaddress.ip_network(proxy, strict=False):
                    return True
            elif client_addr == ipaddress.ip_address(proxy):
                return True
        except ValueError:
            logger.debug(f"Ignoring malformed trusted proxy entry: {proxy}")
    return False


def get_client_ip(request: Request) -> str:
    """
    Extract client IP from request.

    Priority:
    1. Direct peer is a trusted proxy -> first non-proxy X-Forwarded-For entry
    2. Otherwise -> direct connection IP

    Args:
        request: FastAPI Request object

    Returns:
        Client IP address string
    """
    direct_ip = request.client.host if request.client else None
    trusted = get_settings().TRUSTED_PROXIES

    if direct_ip and _is_trusted_proxy(direct_ip, trusted):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # X-Forwarded-For format: "client, proxy1, proxy2"
            ips = [ip.strip() for ip in forwarded_for.split(",") if ip.strip()]
            for ip in ips:
                if not _is_trusted_proxy(ip, trusted):
                    return ip
            if ips:
                return ips[0]

    return direct_ip or "unknown"
