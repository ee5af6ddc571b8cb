"""
app/mappers package marker.
"""

from app.mappers.record_mapper import RecordMapper, RowMaterializationError, coerce_leaf

__all__ = [
    "RecordMapper",
    "RowMaterializationError",
    "coerce_leaf",
]
