"""Adaptive learning backend: AI content generation with local fallbacks."""

__version__ = "0.1.0"
