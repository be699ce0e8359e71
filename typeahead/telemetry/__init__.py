"""NDJSON telemetry for selections and persistence errors."""
