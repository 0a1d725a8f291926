"""Recruitment admin console: approval workflow and HR API adapters."""

__version__ = "0.1.0"
