"""Route Modules — one file per resource group/concern.

Invariants:
    - Each module exposes its own APIRouter(s) with prefix and tags
    - Routes never contain business logic (delegate to the dispatcher)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
