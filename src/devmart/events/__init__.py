"""Persisted application events."""
