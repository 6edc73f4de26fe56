"""Persistence — atomic read/write of the user config file."""
