"""Run the application under uvicorn: `python -m switchyard`."""

import uvicorn

from switchyard.config import settings
from switchyard.main import app


def main() -> None:
    # Forwarded headers are handled by ForwardedHeadersMiddleware; uvicorn's
    # own proxy header support would rewrite the client address first.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        proxy_headers=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
