"""Core business logic layer.

Subpackages:
- week: ISO week ids and weekday dates
- notes: weekly note Markdown codec, merge engine and overview document
- scanner: eSCL capabilities parsing and scan request XML
- sync: the read -> merge -> write use cases for weekly notes and settings
"""
__all__ = ["week", "notes", "scanner", "sync"]
