"""Core business logic layer.

Subpackages:
- quantity: day-count quantity expressions
- ordering: drag-and-drop reordering of ordered scopes
- templates: template instantiation and save-as-template
"""
__all__ = ["quantity", "ordering", "templates"]
