"""Utility functions for domainarch.

Example:
    >>> from domainarch.utils.logging import setup_logging
    >>> setup_logging(verbosity=2)
"""
