"""Domain models and the error hierarchy."""
