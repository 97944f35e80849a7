"""
Bookshelf Backend: Services Layer
==================================

Service Inventory:
    - BookValidator: JSON Schema validation of write-path request bodies
    - BookService:   The five book operations, one SQL statement each
"""
