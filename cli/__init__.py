"""CLI package for the session API client

Provides commands to inspect, create, refresh and discard the stored
session and to send authenticated requests.
"""

from cli.main import main

__all__ = [
    "main",
]
