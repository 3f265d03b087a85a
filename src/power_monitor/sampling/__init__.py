"""Sampling scheduler driving the telemetry window."""
