"""Domain layer: request/settings value objects and the error taxonomy."""
