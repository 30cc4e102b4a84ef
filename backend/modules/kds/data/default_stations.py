# backend/modules/kds/data/default_stations.py

"""
Stations seeded into an empty kitchen.
"""

DEFAULT_STATIONS = [
    {
        "id": "grill",
        "name": "Grill Station",
        "color": "#ef4444",
        "categories": ["mains", "burgers", "steaks", "grilled"],
        "enabled": True,
        "display_order": 1,
    },
    {
        "id": "salad",
        "name": "Salad Station",
        "color": "#10b981",
        "categories": ["starters", "salads", "cold"],
        "enabled": True,
        "display_order": 2,
    },
    {
        "id": "fry",
        "name": "Fry Station",
        "color": "#f59e0b",
        "categories": ["sides", "fries", "fried"],
        "enabled": True,
        "display_order": 3,
    },
    {
        "id": "dessert",
        "name": "Dessert Station",
        "color": "#8b5cf6",
        "categories": ["desserts", "sweets", "pastry"],
        "enabled": True,
        "display_order": 4,
    },
    {
        "id": "drinks",
        "name": "Beverage Station",
        "color": "#06b6d4",
        "categories": ["beverages", "drinks", "cocktails"],
        "enabled": True,
        "display_order": 5,
    },
]
