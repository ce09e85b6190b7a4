"""HTTP surface: FastAPI application, dependency wiring and rate limiting."""
