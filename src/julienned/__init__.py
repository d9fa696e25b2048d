"""
Julienned recipe and meal-planning backend.

The package stores recipes and meal plans per user and derives categorized
shopping lists from the meals planned for a date range.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
