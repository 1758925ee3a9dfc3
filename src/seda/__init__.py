"""seda — fetch repository snapshots without git history."""

__version__ = "0.1.0"
