"""
Bookshelf Backend: API Routes Package
======================================

Route Inventory:
    - books.py:   GET    /books              (list every book)
                  GET    /books/{isbn}       (fetch one book)
                  POST   /books              (create, JSON Schema checked)
                  PUT    /books/{isbn}       (replace non-key fields, JSON Schema checked)
                  DELETE /books/{isbn}       (remove)
    - health.py:  GET    /health             (service health check)

Routes stay thin: parse path/body, validate, call the service, wrap the
result in its envelope. Errors propagate to the handlers in main.py.
"""
