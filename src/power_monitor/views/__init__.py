"""Render-ready projections of the telemetry window."""
