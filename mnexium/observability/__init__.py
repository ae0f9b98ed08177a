"""Observability: structured logging, metrics, tracing.

Uses structlog for logging, Prometheus for metrics and OpenTelemetry
for the demo server's tracing.
"""
