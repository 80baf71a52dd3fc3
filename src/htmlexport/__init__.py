"""htmlexport - static HTML export for component libraries."""

__version__ = "0.1.0"
