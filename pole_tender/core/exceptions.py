"""
Custom Exceptions - Pole Tender Scoring
pole_tender/core/exceptions.py

The scoring engine itself never raises; these cover the lookup and API layers.
"""


class ScoringException(Exception):
    """Base exception for the pole tender scoring service."""

    pass


class UnknownPoleTypeException(ScoringException):
    """Pole type key not present in the catalog."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Pole type '{key}' not found in catalog")
