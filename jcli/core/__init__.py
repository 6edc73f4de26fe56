"""Core — models, persistence, observability and services."""
