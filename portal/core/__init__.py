"""Core wiring: settings, constants, exception handlers, lifespan and rate limits."""
