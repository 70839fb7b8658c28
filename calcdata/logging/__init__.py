"""Labeled stdout logging."""
