"""Pydantic schemas for upstream payloads and tool results."""
