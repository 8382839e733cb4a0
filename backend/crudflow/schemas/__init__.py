"""Pydantic Schemas — entity contracts shared by both presentation flows.

Invariants:
    - Schemas validate at system boundary (form posts, JSON bodies, API responses)
    - Every schema satisfies the Identifiable contract (mutable optional `id`)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
    - One schema per entity for create, update and response: the dispatcher owns `id`
"""
