"""Output directory access and file naming."""
