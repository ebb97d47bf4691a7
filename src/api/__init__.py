"""Public programmatic API."""
