"""
Core Package - Pole Tender Scoring
pole_tender/core/__init__.py

Core infrastructure: exceptions.
"""

from pole_tender.core.exceptions import (
    ScoringException,
    UnknownPoleTypeException,
)

__all__ = [
    "ScoringException",
    "UnknownPoleTypeException",
]
