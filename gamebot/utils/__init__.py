"""Utility functions for gamebot."""
