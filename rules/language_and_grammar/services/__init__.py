"""Shared services for the grammar passes."""
