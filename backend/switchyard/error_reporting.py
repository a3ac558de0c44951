"""
Switchyard — Error Reporting
=============================

What:  Turns unexpected exceptions into error responses.
How:   ErrorReporter holds an ordered list of exception handlers. Each one may
       answer with a response or return None to pass; the first answer wins.
       When nobody answers, a generic JSON 500 body is returned that never
       exposes internals.
Who:   Registered as the application's `Exception` handler by create_app().

Handlers:
    JsonResponseHandler  — JSON error document, optionally with a trace,
                           optionally only for XMLHttpRequest callers
    PrettyPageHandler    — Starlette's HTML traceback page (debug only)

Every reported exception is logged with its stack trace, whichever handler
produced the response.
"""

import logging
import traceback
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from starlette.middleware.errors import ServerErrorMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response

logger = logging.getLogger(__name__)

STATUS_INTERNAL_SERVER_ERROR = 500


def is_ajax_request(request: Request) -> bool:
    return request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"


def format_trace(exc: BaseException) -> List[str]:
    return traceback.format_exception(type(exc), exc, exc.__traceback__)


class ExceptionHandler(ABC):
    @abstractmethod
    def handle(self, request: Request, exc: Exception) -> Optional[Response]:
        ...


class JsonResponseHandler(ExceptionHandler):
    def __init__(self, show_trace: bool = False, ajax_only: bool = True):
        self.show_trace = show_trace
        self.ajax_only = ajax_only

    def handle(self, request: Request, exc: Exception) -> Optional[Response]:
        if self.ajax_only and not is_ajax_request(request):
            return None

        error = {"type": type(exc).__name__, "message": str(exc)}
        if self.show_trace:
            error["trace"] = [line.rstrip("\n") for line in format_trace(exc)]
        return JSONResponse(status_code=STATUS_INTERNAL_SERVER_ERROR, content={"error": error})


class PrettyPageHandler(ExceptionHandler):
    """
    Starlette's debug traceback page.

    The application itself runs with debug off, so that this page is only
    one handler in the reporter's chain and JSON callers are answered first.
    """

    def __init__(self):
        self._debugger = ServerErrorMiddleware(app=None, debug=True)

    def handle(self, request: Request, exc: Exception) -> Optional[Response]:
        return HTMLResponse(
            self._debugger.generate_html(exc),
            status_code=STATUS_INTERNAL_SERVER_ERROR,
        )


class ErrorReporter:
    def __init__(self, handlers: Optional[Iterable[ExceptionHandler]] = None):
        self.handlers: List[ExceptionHandler] = list(handlers or [])

    def push_handler(self, handler: ExceptionHandler) -> None:
        self.handlers.append(handler)

    def pop_handler(self) -> Optional[ExceptionHandler]:
        return self.handlers.pop() if self.handlers else None

    async def __call__(self, request: Request, exc: Exception) -> Response:
        logger.error(
            "Unexpected error on %s %s: %s",
            request.method,
            request.url.path,
            str(exc),
            exc_info=exc,
        )

        for handler in self.handlers:
            response = handler.handle(request, exc)
            if response is not None:
                return response

        return JSONResponse(
            status_code=STATUS_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
            },
        )
