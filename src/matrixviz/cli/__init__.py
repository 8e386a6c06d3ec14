"""Command line interface for matrixviz."""
