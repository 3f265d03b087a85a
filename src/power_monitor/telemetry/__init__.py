"""Derived telemetry: unit conversion, index resolution, sliding window."""
