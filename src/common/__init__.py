"""Shared helpers: HTTP access, logging, timestamps."""
