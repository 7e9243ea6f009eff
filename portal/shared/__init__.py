"""Shared kernel: request context, utilities and telemetry."""
