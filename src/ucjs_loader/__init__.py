"""Declarative user-script registry and conditional loader."""

__version__ = "0.3.0"
