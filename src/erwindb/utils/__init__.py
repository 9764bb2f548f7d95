"""Utility modules for erwindb."""
