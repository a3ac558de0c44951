# Routes package init
"""
Switchyard — API Routes Package
================================

Route Inventory:
    - health.py:  GET /health  (service health check)

Every path without a route is answered by the NotFoundHandler, installed
as the router's default endpoint.
"""
