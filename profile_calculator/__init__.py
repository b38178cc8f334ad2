"""Profile Calculator - set operations over mod-selector profiles."""

__version__ = "0.3.0"
