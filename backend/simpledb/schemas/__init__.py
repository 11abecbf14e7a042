"""Pydantic Schemas - validation for schema files and API payloads.

Invariants:
    - Schemas validate at the system boundary (config files, HTTP bodies)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from core dataclasses: schemas are contracts, core types are the model
"""
