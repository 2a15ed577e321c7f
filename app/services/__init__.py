"""Service layer orchestrating application use-cases."""
