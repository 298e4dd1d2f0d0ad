"""
API routers, one module per resource. Mounted under ``/api`` by
``grant_portal.server.main`` (health endpoints at the root).
"""
