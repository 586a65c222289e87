"""Domain layer: models, ports and pure analysis services."""
