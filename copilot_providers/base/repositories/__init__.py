"""Repositories (in-memory model capability cache)."""
