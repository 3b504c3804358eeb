"""Core — pure domain logic (no IO, no framework imports).

Invariants:
    - Modules here never import from api/, services/ or infrastructure/
    - Every function is deterministic given its inputs (clock passed in where needed)
"""
