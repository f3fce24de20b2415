"""Domain layer: entities, exceptions and pure computation services."""
