"""
Team voting.

Responsibilities:
- Record votes under per-user caps and duplicate rules.
- Bind each vote to the canonical slot of its menu on the board.
- Tally votes into a ranked result and report quorum progress.
"""
