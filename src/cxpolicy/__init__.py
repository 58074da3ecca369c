"""Catena-X policy definition validation service."""

__version__ = "0.1.0"
