"""Retire inactive GitHub team members into an alumni team."""

__version__ = "0.1.0"
