"""
Response helpers.

Starlette responses are built once and sent; there is no `with_status()`
on them. derive_response() gives the same effect: a fresh response that
copies the prototype's headers and never touches the prototype itself.
"""

from typing import Optional

from starlette.responses import Response

# Recomputed for every derived response from its own body and media type
_BODY_HEADERS = {b"content-length", b"content-type"}


def derive_response(
    prototype: Response,
    status_code: int,
    content: str = "",
    media_type: Optional[str] = None,
) -> Response:
    response = Response(
        content=content,
        status_code=status_code,
        media_type=media_type or prototype.media_type,
    )
    response.raw_headers.extend(
        (key, value) for key, value in prototype.raw_headers if key not in _BODY_HEADERS
    )
    return response
