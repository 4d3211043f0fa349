"""
Index package for Sales Insight.

Holds the AVL tree that owns every product record in a session.
"""

from sales_insight.index.avl import AVLNode, ProductIndex

__all__ = [
    "AVLNode",
    "ProductIndex",
]
