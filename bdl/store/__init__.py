"""
Data access for the hosted relational store.
"""

from bdl.store.client import QueryBuilder, StoreClient

__all__ = ["QueryBuilder", "StoreClient"]
