"""
Official journal of the Bureau des Lycéens.

This package provides:
1. The entry and modification data model
2. Diff-marked rendering of a single modification
3. The modifications history list
4. The collapsible heading outline of an article body
5. The consolidated article view combining the above
"""

__version__ = "0.1.0"
