"""Auth domain services."""
