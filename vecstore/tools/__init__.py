"""Single-purpose tools callable by an orchestrator."""

from vecstore.tools.base import Tool
from vecstore.tools.dataforseo import DataForSeoTool, extract_top_description

__all__ = ["DataForSeoTool", "Tool", "extract_top_description"]
