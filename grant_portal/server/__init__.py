"""
Grant Portal Server Package.

This package contains the web server implementation for Grant Portal.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    auth: Supabase client, server-side sessions and the current-user dependency.
    core: Configuration and constants.
    services: Access rules, audit logging, uploads and the workflow services.
    exception_handlers: Mapping of errors to JSON responses.
    middleware: Request tracing middleware.
"""
