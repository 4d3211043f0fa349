"""
AVL index over product records, keyed by product id.

Each `AVLNode` owns exactly one `ProductRecord` and its two subtrees. Insert
and delete are recursive helpers that return the (possibly new) root of the
subtree they were given, so every ancestor on the path is re-linked and
rebalanced as the recursion unwinds. No parent pointers are kept.

Usage:
    from sales_insight.index.avl import ProductIndex

    index = ProductIndex()
    index.insert(record)
    index.search(42)
    index.delete(42)
"""

from __future__ import annotations

from typing import Iterator, List, Literal, Optional

from sales_insight.domain.errors import (
    DuplicateKeyError,
    IndexInvariantError,
    ProductNotFoundError,
)
from sales_insight.domain.models import ProductRecord
from sales_insight.utils.logging import get_logger

log = get_logger(__name__)

TraversalOrder = Literal["in", "pre"]


class AVLNode:
    __slots__ = ("record", "left", "right", "height")

    def __init__(self, record: ProductRecord) -> None:
        self.record = record
        self.left: Optional[AVLNode] = None
        self.right: Optional[AVLNode] = None
        self.height = 1

    @property
    def key(self) -> int:
        return self.record.id

    def __repr__(self) -> str:
        return f"AVLNode(id={self.key}, height={self.height})"


def _height(node: Optional[AVLNode]) -> int:
    return node.height if node else 0


def _update_height(node: AVLNode) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance(node: Optional[AVLNode]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _rotate_right(pivot: AVLNode) -> AVLNode:
    child = pivot.left
    inner = child.right  # type: ignore[union-attr]

    child.right = pivot  # type: ignore[union-attr]
    pivot.left = inner

    _update_height(pivot)
    _update_height(child)
    return child


def _rotate_left(pivot: AVLNode) -> AVLNode:
    child = pivot.right
    inner = child.left  # type: ignore[union-attr]

    child.left = pivot  # type: ignore[union-attr]
    pivot.right = inner

    _update_height(pivot)
    _update_height(child)
    return child


def _insert(node: Optional[AVLNode], record: ProductRecord) -> AVLNode:
    if node is None:
        return AVLNode(record)

    key = record.id
    if key < node.key:
        node.left = _insert(node.left, record)
    elif key > node.key:
        node.right = _insert(node.right, record)
    else:
        raise DuplicateKeyError(key)

    _update_height(node)
    balance = _balance(node)

    # LL
    if balance > 1 and key < node.left.key:  # type: ignore[union-attr]
        return _rotate_right(node)
    # RR
    if balance < -1 and key > node.right.key:  # type: ignore[union-attr]
        return _rotate_left(node)
    # LR
    if balance > 1 and key > node.left.key:  # type: ignore[union-attr]
        node.left = _rotate_left(node.left)  # type: ignore[arg-type]
        return _rotate_right(node)
    # RL
    if balance < -1 and key < node.right.key:  # type: ignore[union-attr]
        node.right = _rotate_right(node.right)  # type: ignore[arg-type]
        return _rotate_left(node)

    return node


def _min_node(node: AVLNode) -> AVLNode:
    current = node
    while current.left is not None:
        current = current.left
    return current


def _rebalance_after_delete(node: AVLNode) -> AVLNode:
    _update_height(node)
    balance = _balance(node)

    if balance > 1:
        if _balance(node.left) < 0:
            node.left = _rotate_left(node.left)  # type: ignore[arg-type]
        return _rotate_right(node)
    if balance < -1:
        if _balance(node.right) > 0:
            node.right = _rotate_right(node.right)  # type: ignore[arg-type]
        return _rotate_left(node)
    return node


def _delete(node: Optional[AVLNode], key: int, removed: List[ProductRecord]) -> Optional[AVLNode]:
    if node is None:
        raise ProductNotFoundError(key)

    if key < node.key:
        node.left = _delete(node.left, key, removed)
    elif key > node.key:
        node.right = _delete(node.right, key, removed)
    else:
        if node.left is None or node.right is None:
            if not removed:
                removed.append(node.record)
            return node.left if node.left is not None else node.right

        # Two children: the successor's record moves into this position and
        # its old node is removed from the right subtree.
        successor = _min_node(node.right)
        if not removed:
            removed.append(node.record)
        node.record = successor.record
        node.right = _delete(node.right, successor.key, removed)

    return _rebalance_after_delete(node)


def _walk(node: Optional[AVLNode], order: TraversalOrder) -> Iterator[AVLNode]:
    if node is None:
        return
    if order == "pre":
        yield node
    yield from _walk(node.left, order)
    if order == "in":
        yield node
    yield from _walk(node.right, order)


def _audit(node: Optional[AVLNode], low: Optional[int], high: Optional[int]) -> int:
    """Return the true height of `node`, raising on the first broken invariant."""
    if node is None:
        return 0
    if (low is not None and node.key <= low) or (high is not None and node.key >= high):
        raise IndexInvariantError(f"BST ordering violated at id {node.key}")

    left_height = _audit(node.left, low, node.key)
    right_height = _audit(node.right, node.key, high)
    height = 1 + max(left_height, right_height)

    if node.height != height:
        raise IndexInvariantError(
            f"Cached height {node.height} != actual {height} at id {node.key}"
        )
    if abs(left_height - right_height) > 1:
        raise IndexInvariantError(
            f"Balance factor {left_height - right_height} out of range at id {node.key}"
        )
    return height


class ProductIndex:
    """
    Self-balancing ordered index of product records.

    Iteration yields records in ascending id order.
    """

    def __init__(self) -> None:
        self._root: Optional[AVLNode] = None
        self._size = 0

    @property
    def root(self) -> Optional[AVLNode]:
        return self._root

    @property
    def height(self) -> int:
        return _height(self._root)

    def insert(self, record: ProductRecord) -> ProductRecord:
        """
        Insert `record` under its id and rebalance.

        Raises
        ------
        DuplicateKeyError
            If the id is already indexed. The existing record is not touched.
        """
        self._root = _insert(self._root, record)
        self._size += 1
        log.debug("Inserted product", extra={"product_id": record.id, "size": self._size})
        return record

    def search(self, product_id: int) -> Optional[ProductRecord]:
        """Return the record with `product_id`, or None when absent."""
        node = self._root
        while node is not None:
            if product_id == node.key:
                return node.record
            node = node.left if product_id < node.key else node.right
        return None

    def get(self, product_id: int) -> ProductRecord:
        record = self.search(product_id)
        if record is None:
            raise ProductNotFoundError(product_id)
        return record

    def delete(self, product_id: int) -> ProductRecord:
        """
        Remove the record with `product_id` and return it.

        Raises
        ------
        ProductNotFoundError
            If the id is absent. The tree is not modified.
        """
        removed: List[ProductRecord] = []
        self._root = _delete(self._root, product_id, removed)
        self._size -= 1
        log.debug("Deleted product", extra={"product_id": product_id, "size": self._size})
        return removed[0]

    def traverse(self, order: TraversalOrder = "in") -> Iterator[ProductRecord]:
        for node in _walk(self._root, order):
            yield node.record

    def ids(self) -> List[int]:
        return [record.id for record in self.traverse()]

    def check_invariants(self) -> None:
        """
        Verify BST ordering, cached heights and AVL balance at every node.

        Raises
        ------
        IndexInvariantError
            On the first violation found.
        """
        _audit(self._root, None, None)
        count = sum(1 for _ in _walk(self._root, "in"))
        if count != self._size:
            raise IndexInvariantError(f"Size counter {self._size} != node count {count}")

    def __iter__(self) -> Iterator[ProductRecord]:
        return self.traverse("in")

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._root is not None

    def __contains__(self, product_id: object) -> bool:
        return isinstance(product_id, int) and self.search(product_id) is not None


__all__ = ["AVLNode", "ProductIndex", "TraversalOrder"]
