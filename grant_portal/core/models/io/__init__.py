"""
I/O models for the HTTP API.

Pydantic request and response schemas, one module per resource. Read models
are built from entities with ``model_validate`` (``from_attributes``).
"""
