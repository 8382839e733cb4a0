"""crudflow Application Package — generic CRUD dispatch over pluggable persistence.

Invariants:
    - Package root holds only __version__ (import side-effects prohibited)

Design Decisions:
    - Explicit imports only, no star exports (ADR: no convention-over-config)
"""

__version__ = "1.0.0"
