"""Domain layer - tables, identifiers, predicates and errors."""
