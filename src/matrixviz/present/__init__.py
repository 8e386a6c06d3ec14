"""Text presentation of matrices, decompositions and the reference cube."""

from .tables import format_matrix, format_vector, json_values, render_report, report_dict

__all__ = [
    "format_matrix",
    "format_vector",
    "json_values",
    "render_report",
    "report_dict",
]
