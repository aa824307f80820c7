"""
Shared Types

Query descriptions passed between the builder, the executor and callers.
"""

from selectkit.shared.types.models import BuiltStatement, CountSpec, QuerySpec

__all__ = [
    "BuiltStatement",
    "CountSpec",
    "QuerySpec",
]
