"""Exception types raised by the serializer.

WHY: Callers need typed exceptions to tell structural problems (a
document built out of order, a type tag with no formatter, a broken
snapshot file) apart from ordinary bugs. Missing or partial catalog data
is never an error (it renders as zero values), so this list is short.

RULES:
- Every exception derives from CatalogSerializerError
- Messages name the offending tag, kind or path
"""


class CatalogSerializerError(Exception):
    """Base class for all serializer errors."""


class XmlWriterError(CatalogSerializerError):
    """Raised when an element is closed out of order or written after close."""


class UnsupportedEntityKindError(CatalogSerializerError, ValueError):
    """Raised when a runtime type tag has no formatter in a dispatch table.

    WHY: Queue rows and podcast episodes carry their own type tag. Rather
    than constructing whatever class the tag names, the serializer looks
    the tag up in a closed table and refuses anything it does not know.
    """

    def __init__(self, kind: object, context: str) -> None:
        self.kind = kind
        self.context = context
        super().__init__(f"No {context} formatter for entity kind {kind!r}")


class SnapshotError(CatalogSerializerError):
    """Raised when a catalog snapshot file cannot be read or validated."""
