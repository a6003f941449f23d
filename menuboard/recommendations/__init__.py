"""
Menu recommendation engine.

Responsibilities:
- Accept per-dimension options (taste, carb, weather, category).
- Filter the menu catalog to matching items.
- Group matches into the fixed category order.
- Persist the result as a board's menu selection, or serve it to guests.
"""
