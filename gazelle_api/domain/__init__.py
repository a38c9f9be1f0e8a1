"""Domain layer: models, errors, events and interfaces. No I/O lives here."""
