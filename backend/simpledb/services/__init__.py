"""Services Layer - provider context and generic operation routing.

Invariants:
    - One ProviderContext per process, passed explicitly (no module-level singletons)
    - Routing is table-agnostic: no per-table branches anywhere

Design Decisions:
    - Router depends on core + storage protocol only; the shell wires concrete adapters
"""
