"""
Switchyard — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types and values, and provides a singleton `settings` object.
       Nested sections use `__` as delimiter, e.g.
       X_FORWARDED__TRUSTED_PROXIES='["10.0.0.0/8"]'.
When:  Loaded once at import time; malformed proxy or header entries fail
       here, at startup, never on the first request.

The same models accept the nested mapping form used by application wiring:

    Settings.model_validate({
        "x_forwarded": {
            "trusted_proxies": ["192.168.1.0/24"],
            "trusted_headers": ["X-Forwarded-Host"],
        },
    })

Omitting the `x_forwarded` section trusts no proxy at all.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from switchyard.exceptions import ConfigurationError
from switchyard.http.request_filter import TRUST_ANY, canonical_header_name, parse_networks


class XForwardedSettings(BaseModel):
    """
    Which upstream proxies may rewrite the request URI via X-Forwarded-*.

    trusted_proxies:
        IP addresses, CIDR networks, or "*" for any address. Empty trusts nothing.
    trusted_headers:
        Subset of X-Forwarded-Host / X-Forwarded-Proto / X-Forwarded-Port.
        None (key absent) trusts all three for matched proxies; an empty
        list trusts none of them.
    """

    trusted_proxies: List[str] = Field(default_factory=list)
    trusted_headers: Optional[List[str]] = None

    @field_validator("trusted_proxies")
    @classmethod
    def validate_trusted_proxies(cls, v: List[str]) -> List[str]:
        proxies = []
        for entry in v:
            entry = entry.strip()
            if entry != TRUST_ANY:
                try:
                    parse_networks([entry])
                except ConfigurationError as exc:
                    raise ValueError(exc.message)
            proxies.append(entry)
        return proxies

    @field_validator("trusted_headers")
    @classmethod
    def validate_trusted_headers(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        headers = []
        for name in v:
            canonical = canonical_header_name(name)
            if canonical is None:
                raise ValueError(f"Unsupported forwarded header '{name}'")
            headers.append(canonical)
        return headers


class JsonExceptionsSettings(BaseModel):
    """Controls the JSON error handler of the error reporter."""

    display: bool = False
    show_trace: bool = False
    ajax_only: bool = True


class ErrorReportingSettings(BaseModel):
    json_exceptions: JsonExceptionsSettings = Field(default_factory=JsonExceptionsSettings)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development-friendly defaults. Production deployments
    behind a reverse proxy MUST list their proxies in x_forwarded, otherwise
    forwarded headers are ignored.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    # What: Enables the HTML traceback page of the error reporter
    # Never enable on a public deployment: it exposes source paths
    debug: bool = Field(default=False)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Not-Found Handler ─────────────────────────────────────────────────
    # What: Directory of Jinja2 templates; unset means plain-text 404 bodies
    templates_dir: Optional[str] = Field(default=None)
    not_found_template: str = Field(default="error::404")
    not_found_layout: str = Field(default="layout::default")

    # ── Request Filtering ─────────────────────────────────────────────────
    x_forwarded: XForwardedSettings = Field(default_factory=XForwardedSettings)

    # ── Error Reporting ───────────────────────────────────────────────────
    errors: ErrorReportingSettings = Field(default_factory=ErrorReportingSettings)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }


settings = Settings()
