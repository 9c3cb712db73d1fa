"""Data loading helpers for JSON content definitions."""
