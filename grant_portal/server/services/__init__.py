"""
Service layer.

Business rules for each resource live here; API routers translate HTTP
input into service calls. Services raise the typed errors from
``grant_portal.core.errors``.
"""
