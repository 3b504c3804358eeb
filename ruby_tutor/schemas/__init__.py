"""Pydantic schemas — API request/response bodies and structured LLM outputs."""
