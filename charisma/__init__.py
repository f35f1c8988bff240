"""Charisma — interactive AI coding agent."""

__version__ = "1.0.0"
