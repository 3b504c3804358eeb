"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON, except chat endpoints which stream SSE

Design Decisions:
    - Thin routes delegate to stores, the orchestrator and the generator
"""
