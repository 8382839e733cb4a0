"""API Layer — router factories, response adapters, error handlers, middleware.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes never classify results themselves: dispatcher classifies, adapters package

Design Decisions:
    - Thin routes delegate to CrudDispatcher (ADR: impureim sandwich)
    - Two adapters, one per presentation shape, instead of a controller hierarchy
"""
