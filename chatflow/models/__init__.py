"""Pydantic records and API schemas."""
