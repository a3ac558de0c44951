"""
Server request factory.

Builds the Starlette Request for an incoming ASGI scope and runs it through
the configured request filter, so every consumer sees the same rewritten
request. The factory is always a closure, never a bare reference to the
Request class.
"""

from typing import Callable, Optional

from starlette.requests import Request, empty_receive
from starlette.types import Receive, Scope

ServerRequestFactory = Callable[..., Request]
RequestFilter = Callable[[Request], Request]


def create_server_request_factory(
    request_filter: Optional[RequestFilter] = None,
) -> ServerRequestFactory:
    def create_request(scope: Scope, receive: Receive = empty_receive) -> Request:
        request = Request(scope, receive)
        if request_filter is None:
            return request
        return request_filter(request)

    return create_request
