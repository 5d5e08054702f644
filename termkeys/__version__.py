"""Version information for termkeys."""

__version__ = '1.0.0'
