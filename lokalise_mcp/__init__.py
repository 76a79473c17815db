"""Lokalise MCP: key and translation management tools for Lokalise projects."""

__version__ = "1.0.0"
