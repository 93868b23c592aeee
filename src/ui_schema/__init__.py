"""
Schema Model
Declarative UI tree nodes and their parser
"""

from .models import NodeKind, SchemaNode
from .parser import SchemaParser, SchemaError, parse_schema

__all__ = ["NodeKind", "SchemaNode", "SchemaParser", "SchemaError", "parse_schema"]
