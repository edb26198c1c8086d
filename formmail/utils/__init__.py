"""Helpers shared by the handler."""
