"""Utilities for bda-mcp."""
