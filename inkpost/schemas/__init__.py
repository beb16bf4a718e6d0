"""Pydantic request/response schemas (API contracts), separate from the ORM models."""
