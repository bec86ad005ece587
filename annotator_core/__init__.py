"""
Annotation core: geometry, view transforms, annotation stores and history.
"""

__version__ = "0.1.0"
