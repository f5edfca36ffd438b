"""Rendering of results and descriptors."""
