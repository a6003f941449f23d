"""
Read-only menu catalog.

Responsibilities:
- Load the menu dataset once and keep it in memory.
- Expose menu items with their four tag dimensions.
- Look up single menus by id for the recommendation and voting layers.
"""
