"""Services Layer — orchestration of DB rows, vendor adapters and pure core logic.

Invariants:
    - Services receive their adapters as arguments (no module-level clients)
    - Services raise PhotoboothError subclasses, never HTTPException
"""
