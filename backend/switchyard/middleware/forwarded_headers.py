"""
Switchyard — Forwarded Headers Middleware
==========================================

What:  Applies the server request factory (and with it the trusted-proxy
       X-Forwarded-* filter) to every HTTP request before routing.
How:   Pure ASGI middleware. The factory may return a Request over a
       rewritten copy of the scope; that scope is what the rest of the
       application sees. Lifespan and websocket scopes pass through.
When:  Outermost application middleware, so routing, logging and error
       pages all observe the client-facing scheme, host and port.

Unlike uvicorn's --proxy-headers, only the headers configured as trusted
are honoured, and only for requests whose peer address is a trusted proxy.
"""

from starlette.types import ASGIApp, Receive, Scope, Send

from switchyard.http.request_factory import ServerRequestFactory


class ForwardedHeadersMiddleware:
    def __init__(self, app: ASGIApp, request_factory: ServerRequestFactory):
        self.app = app
        self.request_factory = request_factory

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = self.request_factory(scope, receive)
        await self.app(request.scope, receive, send)
