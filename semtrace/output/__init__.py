"""Text, JSON and Mermaid output."""

from .formatter import audit_to_dict, format_audit_result
from .export import export_audit_json, export_lineage_json, to_mermaid

__all__ = [
    "audit_to_dict",
    "format_audit_result",
    "export_audit_json",
    "export_lineage_json",
    "to_mermaid",
]
