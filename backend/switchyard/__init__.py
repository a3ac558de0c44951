"""
Switchyard — Request/Response Dispatch for ASGI Applications
=============================================================

What:  Emitter stack, not-found handling, trusted-proxy request filtering
       and error reporting, wired into a FastAPI application.

Layout:
    ┌─────────────────────────────────────┐
    │     main.py (application factory)   │  ← wiring, logging, lifespan
    ├─────────────────────────────────────┤
    │  middleware/   runner.py  routes/   │  ← ASGI adapters
    ├─────────────────────────────────────┤
    │  emitter/  handlers/  http/         │  ← dispatch components
    │  templating.py  error_reporting.py  │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
