"""Command-line utilities for the relationship network engine."""
