"""API Layer — FastAPI routers, request dependencies and global error handlers.

Invariants:
    - Tenant lookup and auth live in dependencies.py, never inline in handlers
    - Every error leaves the API as the {"success": false, "error": {...}} envelope
"""
