"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Admin routes depend on require_admin; public routes resolve projects by slug

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
