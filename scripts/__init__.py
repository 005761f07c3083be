"""Offline maintenance commands."""
