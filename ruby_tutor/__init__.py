"""Ruby Tutor Package — backend for Ruby, the AI coding teacher for children.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
