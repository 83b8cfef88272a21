"""Reusable patterns for the coworking marketplace services.

Holds the dataclass-based domain configuration pattern shared by verticals.
"""
