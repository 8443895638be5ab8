"""Markdown front matter helpers."""
