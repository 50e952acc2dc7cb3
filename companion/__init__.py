"""Ramadan companion: prayer times, daily devotional logs, coaching and utilities."""

__version__ = "0.1.0"
