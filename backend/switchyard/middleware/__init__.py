# Middleware package init
"""
Switchyard — Middleware Package
================================

Middleware Chain (outermost first):
    Request → [Forwarded Headers] → [Request Logging] → Router → Route / NotFound runner

    1. Forwarded Headers: rewrite scheme/host/port from trusted proxies
    2. Request Logging: access log with the client-facing URL
"""
