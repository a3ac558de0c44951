# HTTP package init
"""
Switchyard — HTTP Helpers
==========================

What:  Request/response plumbing shared by the handlers and middleware.

Module Inventory:
    - request_filter.py:   Trusted-proxy X-Forwarded-* URI rewriting
    - request_factory.py:  ASGI scope → (filtered) Starlette Request
    - responses.py:        Derive a new response from a prototype
"""
