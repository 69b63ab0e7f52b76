"""
Pytest suite for the Storefront Admin backend.

Test categories:
- Unit tests: services, event parsing and dashboard forms in isolation
- Integration tests: webhook settlement against an in-memory SQLite database
- API tests: the FastAPI app through httpx
"""
