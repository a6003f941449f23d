"""
Boards, memberships and per-board menu selections.
"""
