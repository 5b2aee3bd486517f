# Routes package init
"""
Reprint Backend — API Routes Package
======================================

Route Inventory:
    - books.py:   GET    /api/books              (filtered, paginated list)
                  GET    /api/books/all          (newest books, capped)
                  GET    /api/books/{id}         (single book)
                  POST   /api/books              (create)
                  PUT    /api/books/{id}         (full replace)
                  DELETE /api/books/{id}         (delete)
    - stats.py:   GET    /api/stats              (aggregates)
    - auth.py:    POST   /api/auth/login         (credential check)
                  POST   /api/auth/signup        (register)
    - health.py:  GET    /health                 (service health check)

Routes handle HTTP details only and delegate to services.
"""
