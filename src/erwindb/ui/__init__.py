"""Textual user interface for erwindb."""
