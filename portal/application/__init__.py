"""Application layer: DTOs, ports, session state, services and use cases."""
