from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .. import config


@dataclass
class ViewState:
    flags: config.UiFlags = field(default_factory=config.UiFlags)
    status_text: str = ""
    # Sidebar expand/collapse, default expanded; remembered for the session only
    expanded_categories: Dict[str, bool] = field(default_factory=dict)
    expanded_subcategories: Dict[Tuple[str, str], bool] = field(default_factory=dict)

    def is_category_expanded(self, name: str) -> bool:
        return self.expanded_categories.get(name, True)

    def is_subcategory_expanded(self, category: str, subcategory: str) -> bool:
        return self.expanded_subcategories.get((category, subcategory), True)

    def set_category_expanded(self, name: str, expanded: bool) -> None:
        self.expanded_categories[name] = bool(expanded)

    def set_subcategory_expanded(self, category: str, subcategory: str, expanded: bool) -> None:
        self.expanded_subcategories[(category, subcategory)] = bool(expanded)
