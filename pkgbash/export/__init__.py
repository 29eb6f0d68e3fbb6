"""Renderers for parsed scripts."""

from .json import export_json, fields_to_data, fields_to_json
from .tree import render_tree

__all__ = ["export_json", "fields_to_data", "fields_to_json", "render_tree"]
