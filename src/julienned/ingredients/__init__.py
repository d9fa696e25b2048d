"""Ingredient normalization, keying, classification and parsing helpers."""
