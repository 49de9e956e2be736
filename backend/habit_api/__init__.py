"""
Habit Tracker Backend — Application Package Initializer
=======================================================

What: Marks the `habit_api` directory as a Python package.
Why:  Enables module imports like `from habit_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a clean layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, rules, orchestration
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Domain records + Pydantic contracts
    ├─────────────────────────────────────┤
    │        Store (In-memory state)      │  ← Locked keyed collection
    └─────────────────────────────────────┘

    Routes never touch the store; the service is its only writer.
"""

__version__ = "1.0.0"
