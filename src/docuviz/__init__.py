"""Lazily-activated interactive diagrams for a long technical document."""

__version__ = "0.1.0"
