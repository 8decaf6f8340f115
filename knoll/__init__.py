"""Knoll - ASCII hill terrain from local adjacency rules."""

__version__ = "0.1.0"
