"""Domain layer: query types, enums and exceptions."""
