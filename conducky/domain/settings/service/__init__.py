"""Settings domain services."""
