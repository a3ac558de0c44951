"""
Request handler contract.

A handler turns a request into a response and is terminal: it never hands
the request on to anything else.
"""

from abc import ABC, abstractmethod

from starlette.requests import Request
from starlette.responses import Response


class RequestHandler(ABC):
    @abstractmethod
    async def handle(self, request: Request) -> Response:
        ...
