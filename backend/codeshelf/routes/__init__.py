"""
CodeShelf Backend — API Routes Package
========================================

Route Inventory:
    - snippets.py: /api/snippets CRUD with search and language filters
    - health.py:   GET /api/health

Routes are thin: they read the request, call a service, and shape the
response. Business rules live in codeshelf.services.
"""
