"""Cadence: AI-generated commit detection for Git repositories."""

__version__ = "0.3.0"
