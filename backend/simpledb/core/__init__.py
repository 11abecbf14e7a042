"""Core Layer - schema, addressing, projection and filter logic.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Storage is reached only through the protocols in core/storage_protocols.py
    - Everything except SchemaRegistry.create_all is pure and synchronous

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
