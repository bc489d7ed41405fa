"""Shared helpers backed by third-party geometry libraries."""
