# Services package init
"""
Habit Tracker Backend — Services Layer
=======================================

What:  Business logic layer sitting between routes (HTTP) and the store.

Service Inventory:
    - HabitService: validation, business rules and every store write

Services receive their dependencies (the store, the limits) at
construction, so tests can build one around a fresh store without HTTP.
"""
