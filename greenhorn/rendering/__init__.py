"""Markdown conversion and HTML templating."""
