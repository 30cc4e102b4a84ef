# backend/modules/kds/services/category_matcher.py

"""
Strategies that pick the station for a single order item.

A matcher receives the item name and the enabled stations in routing order
and returns the id of at most one station.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence


class CategoryMatcher(ABC):
    """Maps an item name to one station id, or None"""

    name = "base"

    @abstractmethod
    def match(self, item_name: str, stations: Sequence) -> Optional[str]:
        ...


class FirstMatchMatcher(CategoryMatcher):
    """First station (in routing order) with a keyword inside the item name"""

    name = "first"

    def match(self, item_name: str, stations: Sequence) -> Optional[str]:
        item_name = item_name.lower()
        for station in stations:
            for keyword in station.categories or []:
                if keyword and keyword.lower() in item_name:
                    return station.id
        return None


class LongestKeywordMatcher(CategoryMatcher):
    """
    Longest keyword found in the item name wins.

    "Fried Pastry" contains both "fried" and "pastry"; "pastry" is longer, so
    the item goes to the station owning it. Keywords of equal length resolve
    to the earlier station in routing order.
    """

    name = "longest"

    def match(self, item_name: str, stations: Sequence) -> Optional[str]:
        item_name = item_name.lower()
        best_id = None
        best_length = 0
        for station in stations:
            for keyword in station.categories or []:
                keyword = keyword.lower()
                if keyword and len(keyword) > best_length and keyword in item_name:
                    best_id = station.id
                    best_length = len(keyword)
        return best_id


MATCHERS = {
    FirstMatchMatcher.name: FirstMatchMatcher,
    LongestKeywordMatcher.name: LongestKeywordMatcher,
}


def get_matcher(name: str) -> CategoryMatcher:
    try:
        return MATCHERS[name]()
    except KeyError:
        raise ValueError(f"Unknown category matcher '{name}'")
