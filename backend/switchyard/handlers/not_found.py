"""
Switchyard — Not-Found Handler
===============================

What:  Produces the terminal 404 response when no route matched.
How:   Two explicit branches, chosen by whether a template renderer was
       injected:
         - no renderer: plain-text body "Cannot <METHOD> <URI>"
         - renderer:    body rendered from the configured template, which
                        receives the request and the layout name
When:  Installed as the router's default endpoint (see switchyard.main).

The handler does no content negotiation and no logging. Renderer failures
(e.g. a missing template) propagate to the caller unchanged.
"""

from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from switchyard.handlers.base import RequestHandler
from switchyard.http.responses import derive_response
from switchyard.templating import TemplateRenderer

STATUS_NOT_FOUND = 404


class NotFoundHandler(RequestHandler):
    TEMPLATE_DEFAULT = "error::404"
    LAYOUT_DEFAULT = "layout::default"

    def __init__(
        self,
        response_prototype: Optional[Response] = None,
        renderer: Optional[TemplateRenderer] = None,
        template: str = TEMPLATE_DEFAULT,
        layout: str = LAYOUT_DEFAULT,
    ):
        self.response_prototype = response_prototype if response_prototype is not None else Response()
        self.renderer = renderer
        self.template = template
        self.layout = layout

    async def handle(self, request: Request) -> Response:
        """Creates and returns a 404 response."""
        if self.renderer is None:
            return self._plain_text_response(request)
        return self._templated_response(self.renderer, request)

    def _plain_text_response(self, request: Request) -> Response:
        return derive_response(
            self.response_prototype,
            STATUS_NOT_FOUND,
            f"Cannot {request.method} {request.url}",
            media_type="text/plain",
        )

    def _templated_response(self, renderer: TemplateRenderer, request: Request) -> Response:
        """The template receives the current request as `request`."""
        body = renderer.render(self.template, {"request": request, "layout": self.layout})
        return derive_response(
            self.response_prototype,
            STATUS_NOT_FOUND,
            body,
            media_type="text/html",
        )
