"""
Value tree data model.
"""

from .value import Array, Boolean, DateTime, Float, Integer, String, Table, TomlType, TomlValue

__all__ = [
    "TomlValue",
    "TomlType",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "DateTime",
    "Array",
    "Table",
]
