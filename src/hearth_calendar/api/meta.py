from __future__ import annotations

from typing import Any, Dict, List

from .registry import get_api_functions, register_api


@register_api(
    "list_available_tools",
    description="List all registered API functions with descriptions, categories, and parameter schemas.",
    category="meta",
    tags=("tools", "metadata"),
)
def list_available_tools(category: str = "") -> Dict[str, List[Dict[str, Any]]]:
    functions = sorted(get_api_functions(), key=lambda item: item.name)
    if category:
        functions = [func for func in functions if func.category == category]
    return {"tools": [func.describe() for func in functions]}
