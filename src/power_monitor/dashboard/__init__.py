"""JSON dashboard surface for the telemetry window."""
