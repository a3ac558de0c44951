"""
Switchyard — Exception Hierarchy
=================================

What:  Application-specific exceptions raised while wiring and dispatching.
How:   Each exception carries a message and an optional context dict. Wiring
       code raises them at startup; the runner raises EmitterError at request
       time. Registered exception handlers turn them into JSON responses.

Exception Hierarchy:
    SwitchyardError (base)              → 500 Internal Server Error
    ├── InvalidArgumentError            → value rejected by a collaborator (e.g. EmitterStack)
    ├── ConfigurationError              → malformed configuration, raised at wiring time
    └── EmitterError                    → every emitter declined the response
"""

from typing import Any, Dict, Optional


class SwitchyardError(Exception):
    """
    Base exception for all Switchyard errors.

    Attributes:
        message:  Human-readable description (safe to return in an API response)
        context:  Additional debug info (logged, never returned to the client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidArgumentError(SwitchyardError):
    """
    Raised when a collaborator is handed a value of the wrong kind.

    When:    Pushing, unshifting, inserting or assigning a non-emitter into
             an EmitterStack. The stack is left unchanged.
    """

    def __init__(
        self,
        message: str = "Invalid argument",
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if argument:
            ctx["argument"] = argument
        super().__init__(message=message, context=ctx)
        self.argument = argument


class ConfigurationError(SwitchyardError):
    """
    Raised when wiring-time configuration is malformed.

    When:    A trusted proxy entry is neither an IP address, a CIDR network
             nor the wildcard; a trusted header is not one of the recognized
             X-Forwarded-* names.

    These surface while the application is being built, never on the first
    request that would have used the bad value.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        key: Optional[str] = None,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if key:
            ctx["key"] = key
        if value is not None:
            ctx["value"] = value
        super().__init__(message=message, context=ctx)
        self.key = key
        self.value = value


class EmitterError(SwitchyardError):
    """
    Raised by the request handler runner when no emitter handled a response.

    HTTP:    500 Internal Server Error (nothing was written to the transport,
             so the server can still send its own error response)
    """

    def __init__(
        self,
        message: str = "No emitter was able to emit the response",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
