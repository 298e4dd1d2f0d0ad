"""
Domain and I/O models.

- domain: enums and status transition tables shared by every layer.
- io: Pydantic request/response schemas for the HTTP API.
"""
