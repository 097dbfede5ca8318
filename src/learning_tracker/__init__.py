"""Learning Tracker: activity logging and streak service."""

__version__ = "0.1.0"
