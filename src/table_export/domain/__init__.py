"""Domain layer: value objects, entities, services and faults of the export engine."""
