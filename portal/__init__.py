"""Agency client portal backend."""
