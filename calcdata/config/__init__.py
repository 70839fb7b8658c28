"""Extraction configuration loading."""
