"""Clinic appointment slot generation and booking backend."""

__version__ = "0.1.0"
