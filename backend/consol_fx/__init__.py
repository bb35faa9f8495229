# backend/consol_fx/__init__.py
"""Multi-currency consolidation conversion and rate-gap validation engine."""

__version__ = "1.0.0"
