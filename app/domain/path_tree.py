"""
app/domain/path_tree.py

Tagged tree used to build nested records from dotted field paths.

Every node is either a ``LeafNode`` holding one scalar value or a
``BranchNode`` holding named children. ``BranchNode.insert`` walks a dotted
path, creating branches on demand, and places the value at the last segment.

Structural conflicts
--------------------
A key can hold a leaf or a branch, never both. When a later path needs a
branch where a leaf already sits (``address=x`` then ``address.city=y``), the
leaf is replaced by a fresh branch; when a later path assigns a leaf where a
branch sits, the branch is replaced. The earlier value is discarded in both
cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."


@dataclass
class LeafNode:
    value: Any


@dataclass
class BranchNode:
    children: dict[str, "PathNode"] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.children

    def insert(self, path: str, value: Any) -> None:
        """
        Place ``value`` at ``path`` (split on ``.``), creating branches as needed.
        """

        segments = path.split(PATH_SEPARATOR)
        current = self
        for segment in segments[:-1]:
            child = current.children.get(segment)
            if not isinstance(child, BranchNode):
                if child is not None:
                    logger.debug(
                        "Path conflict: leaf %r replaced by a branch while inserting %r",
                        segment,
                        path,
                    )
                child = BranchNode()
                current.children[segment] = child
            current = child

        leaf_key = segments[-1]
        if isinstance(current.children.get(leaf_key), BranchNode):
            logger.debug(
                "Path conflict: branch %r replaced by a leaf while inserting %r",
                leaf_key,
                path,
            )
        current.children[leaf_key] = LeafNode(value)

    def pop(self, key: str) -> "PathNode | None":
        return self.children.pop(key, None)

    def to_dict(self) -> dict[str, Any]:
        return {key: to_plain(child) for key, child in self.children.items()}


PathNode = Union[LeafNode, BranchNode]


def to_plain(node: PathNode) -> Any:
    """
    Convert a node into plain Python values (dicts and scalars).
    """

    if isinstance(node, LeafNode):
        return node.value
    return node.to_dict()
