"""Infrastructure layer: configuration, logging, tools and dependency wiring."""
