"""Services Layer — async orchestration of draw and participation requests.

Invariants:
    - One service class per resource, constructed per request with its AsyncSession
    - Services raise core.errors types; routes never build error responses

Design Decisions:
    - Thin routes, IO in services, rules in core: rules testable without a database
"""
