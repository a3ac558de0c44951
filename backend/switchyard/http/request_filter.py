"""
Switchyard — Trusted-Proxy X-Forwarded-* Request Filter
========================================================

What:  Rewrites the request URI (host, scheme, port) from X-Forwarded-*
       headers, but only when the request arrives from a trusted proxy.
How:   The remote address (ASGI `client`, the REMOTE_ADDR of the request) is
       matched against configured IP addresses / CIDR networks. Matched
       requests get a copied ASGI scope with a rewritten scheme, `server`
       and Host header; everything else passes through untouched.

Identity contract:
    When no rewrite happens the filter returns the very same Request object,
    so callers can use `filtered is request` to detect a no-op. A rewrite
    always yields a new Request; the original scope is never modified.

Header precedence:
    Trusted headers are applied per URI component in the order
    host → proto → port. A forwarded host may carry a port ("host:8443");
    a trusted X-Forwarded-Port applied afterwards wins for the port.

    A header that was chained by proxies (a comma-separated value or
    repeated header lines) is ignored.
"""

import ipaddress
from typing import Iterable, List, Optional, Tuple, Union
from urllib.parse import urlsplit

from starlette.requests import Request

from switchyard.exceptions import ConfigurationError

HEADER_HOST = "X-Forwarded-Host"
HEADER_PORT = "X-Forwarded-Port"
HEADER_PROTO = "X-Forwarded-Proto"

# Also the order in which headers are applied
X_FORWARDED_HEADERS = (HEADER_HOST, HEADER_PROTO, HEADER_PORT)

TRUST_ANY = "*"

DEFAULT_PORTS = {"http": 80, "https": 443}

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def canonical_header_name(name: str) -> Optional[str]:
    """Returns the canonical spelling of a recognized forwarded header, else None."""
    lowered = name.strip().lower()
    for header in X_FORWARDED_HEADERS:
        if header.lower() == lowered:
            return header
    return None


def parse_networks(proxies: Iterable[str]) -> List[Network]:
    """
    Parses IP addresses and CIDR networks into ip_network objects.

    A bare address becomes a single-host network (/32 or /128).

    Raises:
        ConfigurationError: for entries that are neither.
    """
    networks = []
    for entry in proxies:
        try:
            networks.append(ipaddress.ip_network(entry.strip(), strict=False))
        except ValueError:
            raise ConfigurationError(
                f"Invalid trusted proxy '{entry}'; expected an IP address or CIDR network",
                key="trusted_proxies",
                value=entry,
            )
    return networks


def parse_headers(headers: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalizes trusted header names, keeping the fixed application order.

    Raises:
        ConfigurationError: for names outside the recognized X-Forwarded-* set.
    """
    requested = set()
    for name in headers:
        canonical = canonical_header_name(name)
        if canonical is None:
            raise ConfigurationError(
                f"Unsupported forwarded header '{name}'",
                key="trusted_headers",
                value=name,
            )
        requested.add(canonical)
    return tuple(h for h in X_FORWARDED_HEADERS if h in requested)


def _parse_port(value: str) -> Optional[int]:
    if not (value.isascii() and value.isdigit()):
        return None
    port = int(value)
    if 1 <= port <= 65535:
        return port
    return None


def _split_host(value: str) -> Tuple[Optional[str], Optional[int]]:
    try:
        parts = urlsplit("//" + value)
        return parts.hostname, parts.port
    except ValueError:
        # Unparsable port suffix: keep the host, drop the port
        return urlsplit("//" + value.rsplit(":", 1)[0]).hostname, None


class FilterUsingXForwardedHeaders:
    """
    Callable request filter: `filtered = request_filter(request)`.

    Build instances through the named constructors:
        trust_any()                       — any remote address, all headers
        trust_proxies(proxies, headers)   — listed addresses/networks only
    """

    def __init__(
        self,
        networks: Iterable[Network] = (),
        trusted_headers: Iterable[str] = X_FORWARDED_HEADERS,
        trust_any: bool = False,
    ):
        self._networks = tuple(networks)
        self._trusted_headers = parse_headers(trusted_headers)
        self._trust_any = trust_any

    @classmethod
    def trust_any(cls) -> "FilterUsingXForwardedHeaders":
        return cls(trusted_headers=X_FORWARDED_HEADERS, trust_any=True)

    @classmethod
    def trust_proxies(
        cls,
        proxies: Iterable[str],
        trusted_headers: Iterable[str] = X_FORWARDED_HEADERS,
    ) -> "FilterUsingXForwardedHeaders":
        """
        Trust only requests whose remote address matches one of `proxies`.

        A "*" entry trusts every address. An empty list trusts nothing.
        """
        proxies = [p.strip() for p in proxies]
        if TRUST_ANY in proxies:
            return cls(trusted_headers=trusted_headers, trust_any=True)
        return cls(networks=parse_networks(proxies), trusted_headers=trusted_headers)

    @property
    def trusted_headers(self) -> Tuple[str, ...]:
        return self._trusted_headers

    @property
    def networks(self) -> Tuple[Network, ...]:
        return self._networks

    @property
    def trusts_any(self) -> bool:
        return self._trust_any

    def is_trusted(self, remote_addr: Optional[str]) -> bool:
        if self._trust_any:
            return True
        if not remote_addr or not self._networks:
            return False
        try:
            address = ipaddress.ip_address(remote_addr)
        except ValueError:
            return False
        return any(address in network for network in self._networks)

    def __call__(self, request: Request) -> Request:
        if not self._trusted_headers:
            return request

        remote_addr = request.client.host if request.client else None
        if not self.is_trusted(remote_addr):
            return request

        url = request.url
        scheme = url.scheme
        host = url.hostname
        port = url.port
        applied = False

        for header in self._trusted_headers:
            values = request.headers.getlist(header)
            # Chained values (comma list or repeated lines) are ignored
            if len(values) != 1 or "," in values[0]:
                continue
            value = values[0].strip()
            if not value:
                continue

            if header == HEADER_HOST:
                forwarded_host, forwarded_port = _split_host(value)
                if not forwarded_host:
                    continue
                host = forwarded_host
                if forwarded_port is not None:
                    port = forwarded_port
                applied = True
            elif header == HEADER_PROTO:
                proto = value.lower()
                if proto not in DEFAULT_PORTS:
                    continue
                scheme = proto
                applied = True
            elif header == HEADER_PORT:
                forwarded_port = _parse_port(value)
                if forwarded_port is None:
                    continue
                port = forwarded_port
                applied = True

        if not applied or not host:
            return request

        return Request(self._rewrite_scope(request.scope, scheme, host, port), request.receive)

    @staticmethod
    def _rewrite_scope(scope: dict, scheme: str, host: str, port: Optional[int]) -> dict:
        netloc = f"[{host}]" if ":" in host else host
        if port is not None and port != DEFAULT_PORTS.get(scheme):
            netloc = f"{netloc}:{port}"

        rewritten = dict(scope)
        rewritten["scheme"] = scheme
        rewritten["server"] = (host, port if port is not None else DEFAULT_PORTS.get(scheme))
        rewritten["headers"] = [
            (key, value) for key, value in scope.get("headers", []) if key != b"host"
        ] + [(b"host", netloc.encode("latin-1"))]
        return rewritten
