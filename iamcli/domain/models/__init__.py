"""Domain models: groups, operations and attempt outcomes."""
