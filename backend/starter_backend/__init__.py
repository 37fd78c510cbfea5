"""Starter backend: FastAPI + MongoDB service for a single-page client."""

__version__ = "1.0.0"
