"""Domain layer: record format, identifiers, index and recovery logic."""
