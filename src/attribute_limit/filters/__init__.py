"""Built-in filter implementations."""

from attribute_limit.filters.attribute_limit import AttributeLimit
from attribute_limit.filters.base import ProcessingFilter

__all__ = [
    "AttributeLimit",
    "ProcessingFilter",
]
