"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Successful responses are wrapped in the {success, data} envelope

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
