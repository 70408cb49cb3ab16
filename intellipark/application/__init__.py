"""Application layer: ports, request validation and use cases."""
