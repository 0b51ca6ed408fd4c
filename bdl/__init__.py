"""
Bureau des Lycéens site core.

Official journal rendering, scrutins, calendar and roles, backed by the
hosted relational store.
"""

__version__ = "0.1.0"
