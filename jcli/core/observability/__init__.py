"""Observability — logging configuration."""
