"""Command line interface for htmlexport."""
