"""
Switchyard — ASGI Response Emitter
===================================

What:  Sends a Starlette Response over the ASGI transport of the current
       request.
How:   The emitter stack is built once at startup, but the ASGI `send`
       channel only exists per request. Runners bind the transport with
       `bind_transport()` around `emit()`; the binding lives in a ContextVar
       so concurrent requests never see each other's transport.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from switchyard.emitter.base import EmitResult, ResponseEmitter


@dataclass(frozen=True)
class AsgiTransport:
    scope: Scope
    receive: Receive
    send: Send


current_transport: ContextVar[Optional[AsgiTransport]] = ContextVar(
    "current_transport", default=None
)


@contextmanager
def bind_transport(scope: Scope, receive: Receive, send: Send) -> Iterator[AsgiTransport]:
    """Binds the ASGI transport that emitters write to for the enclosed block."""
    transport = AsgiTransport(scope=scope, receive=receive, send=send)
    token = current_transport.set(transport)
    try:
        yield transport
    finally:
        current_transport.reset(token)


class AsgiEmitter(ResponseEmitter):
    """
    Emits any Starlette response through the bound ASGI transport.

    Declines when no transport is bound, leaving the decision to the next
    emitter in the stack (or to the caller when it is the last one).
    """

    async def emit(self, response: Response) -> EmitResult:
        transport = current_transport.get()
        if transport is None:
            return EmitResult.DECLINED

        await response(transport.scope, transport.receive, transport.send)
        return EmitResult.HANDLED
