from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict


class Category(BaseModel):
    """Label used to group expenses in analytics"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str


OTHER_CATEGORY = "other"

DEFAULT_CATEGORIES: Dict[str, Category] = {
    category.id: category
    for category in (
        Category(id="food", name="Food", icon="🍔"),
        Category(id="transport", name="Transport", icon="🚗"),
        Category(id="shopping", name="Shopping", icon="🛍️"),
        Category(id="utilities", name="Utilities", icon="💡"),
        Category(id="entertainment", name="Entertainment", icon="🎉"),
        Category(id=OTHER_CATEGORY, name="Other", icon="🤷"),
    )
}


def get_category(category_id: str) -> Category:
    """Look up a category, falling back to Other for unknown IDs"""
    return DEFAULT_CATEGORIES.get(category_id, DEFAULT_CATEGORIES[OTHER_CATEGORY])
