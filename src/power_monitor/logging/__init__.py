"""Structured logging for Power Monitor."""
