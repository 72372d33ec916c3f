# Routes package init
"""
Book API — API Routes Package
=============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - root.py:   GET /                         (plain-text greeting)
    - books.py:  GET /books/{id}               (synthesized Book)
    - docs.py:   GET /docs                     (Swagger UI)
                 GET /docs/openapi.json        (generated OpenAPI document)

Routes are thin: they extract request data, call the service layer, and
let FastAPI serialize the result. POST /books is documented in api_spec.py
but intentionally has no route here.
"""
