# Routes package init
"""
Todos Backend — API Routes Package
==================================

Route Inventory:
    - todos.py:   POST/GET/DELETE /todos, GET/PATCH/DELETE /todos/{id}
    - health.py:  GET /health

Routes stay thin: parse the request, call the repository, pick the status.
"""
