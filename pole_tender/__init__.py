"""Technical scoring of concrete utility-pole tender bids."""

__version__ = "1.0.0"
