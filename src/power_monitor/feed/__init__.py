"""Telemetry feed loading: fetch, parse, normalize, synthesize."""
