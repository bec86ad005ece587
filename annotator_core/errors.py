"""
Exception types shared by the annotation core.
"""


class AnnotatorError(Exception):
    """Base class for all recoverable annotation core errors."""


class GeometryError(AnnotatorError, ValueError):
    """Raised when a geometric computation has no meaningful result."""


class BBParseError(GeometryError):
    """Raised when a bounding box string cannot be parsed."""


class LabelConflictError(AnnotatorError, ValueError):
    """Raised when a label, color or category id already exists."""


class ImportDataError(AnnotatorError):
    """Raised when persisted annotation data is malformed or inconsistent."""
