# Routes package init
"""
Habit Tracker Backend — API Routes Package
===========================================

Route Inventory:
    - habits.py:  /habit and /habit/{id}[/archive|/restore]  (CRUD + lifecycle)
    - health.py:  GET /health                               (service health check)

Design Principle:
    Routes are THIN: they pass raw input to HabitService and wrap its
    result in the success envelope. Errors are rendered by the global
    handlers in main.py.
"""
