"""
HTTP layer for the bookstore.

Build the app with ``bookstore_web.main.create_app()``; routers live in
``auth_routes`` and ``book_routes``.
"""
