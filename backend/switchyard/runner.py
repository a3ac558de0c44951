"""
Switchyard — Request Handler Runner
====================================

What:  ASGI adapter that runs a RequestHandler and emits its response
       through an EmitterStack.
How:   scope → request (via the server request factory) → handler →
       response → emitter stack, with the ASGI transport bound for the
       duration of the emit.
Who:   Installed as the router's default endpoint so unmatched requests
       reach the NotFoundHandler.

Failure:
    When every emitter declines, nothing has been written and the runner
    raises EmitterError. The surrounding error middleware still owns the
    transport and can send its own 500 response.
"""

import logging
from typing import Optional

from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

from switchyard.emitter.asgi import bind_transport
from switchyard.emitter.base import EmitResult, ResponseEmitter
from switchyard.exceptions import EmitterError
from switchyard.handlers.base import RequestHandler
from switchyard.http.request_factory import ServerRequestFactory, create_server_request_factory

logger = logging.getLogger(__name__)


class RequestHandlerRunner:
    def __init__(
        self,
        handler: RequestHandler,
        emitter: ResponseEmitter,
        request_factory: Optional[ServerRequestFactory] = None,
    ):
        self.handler = handler
        self.emitter = emitter
        self.request_factory = request_factory or create_server_request_factory()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await WebSocketClose()(scope, receive, send)
            return

        request = self.request_factory(scope, receive)
        response = await self.handler.handle(request)

        with bind_transport(request.scope, receive, send):
            result = await self.emitter.emit(response)

        if result is EmitResult.DECLINED:
            raise EmitterError(
                context={
                    "handler": type(self.handler).__name__,
                    "status_code": response.status_code,
                    "path": request.url.path,
                }
            )
        logger.debug(
            "%s emitted %d for %s %s",
            type(self.handler).__name__,
            response.status_code,
            request.method,
            request.url.path,
        )
