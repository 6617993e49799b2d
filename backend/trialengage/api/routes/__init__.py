"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Tenant-scoped routers share the /api/company/{company_id} prefix
    - Multi-step DB work is delegated to services/

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
