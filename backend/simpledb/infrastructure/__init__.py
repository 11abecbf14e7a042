"""Infrastructure Layer - storage engine, change notification and logging.

Invariants:
    - Infrastructure implements the protocols declared in core/storage_protocols.py
    - All driver exceptions mapped to the core error hierarchy before leaving this layer

Design Decisions:
    - Thin wrappers over SQLAlchemy and asyncio primitives (ADR: single responsibility)
"""
