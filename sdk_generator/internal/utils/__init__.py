"""Утилиты для генератора"""

from .naming import (
    normalize_identifier,
    request_class_name,
    resource_group_name,
    response_class_name,
    type_name,
    variable_name,
)

__all__ = [
    "normalize_identifier",
    "request_class_name",
    "resource_group_name",
    "response_class_name",
    "type_name",
    "variable_name",
]
