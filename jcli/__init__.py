"""
jterrazz-cli — macOS developer-workstation assistant (``j``).
"""

__version__ = "0.1.0"
