"""Figma REST API client returning typed fetch results."""
