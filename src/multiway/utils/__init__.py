"""Utility helpers: logging and solver selection."""
