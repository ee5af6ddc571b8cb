"""
app/domain package marker.
"""

from app.domain.path_tree import BranchNode, LeafNode, PathNode
from app.domain.user_record import MANDATORY_FIELDS, RowError, RunSummary, UserRecord

__all__ = [
    "BranchNode",
    "LeafNode",
    "MANDATORY_FIELDS",
    "PathNode",
    "RowError",
    "RunSummary",
    "UserRecord",
]
