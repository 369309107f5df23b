"""
schemas/ — Pydantic request/response models for the marketplace API

Provides input validation, auto-generated OpenAPI docs, and
consistent error messages across all endpoints.
"""
