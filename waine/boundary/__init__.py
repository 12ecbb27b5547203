"""Adapters to external services (vector index, Gemini)."""
