"""Core business logic layer.

Subpackages:
- planning: date ranges and swap-merge of the active menu
- importing: CSV recipe import
- generation: prompts, output schemas and response validation
- state: per-client application state
"""
__all__ = ["planning", "importing", "generation", "state"]
