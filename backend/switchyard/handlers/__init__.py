# Handlers package init
"""
Switchyard — Request Handlers
==============================

Handler Inventory:
    - RequestHandler (abstract): request → response, terminal
    - NotFoundHandler: 404 fallback, plain text or templated
"""
