from __future__ import annotations


class MenuBoardError(Exception):
    """Base class for rule violations surfaced to the API layer."""

    status_code: int = 400
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(MenuBoardError):
    status_code = 404


class BoardNotFound(NotFoundError):
    default_message = "Board not found"


class MenuNotFound(NotFoundError):
    default_message = "Menu not found"


class VoteNotFound(NotFoundError):
    default_message = "Vote not found"


class SlotNotFound(NotFoundError):
    default_message = "Menu is not on this board"


class UserNotFound(NotFoundError):
    default_message = "User not found"


class UnauthorizedVote(MenuBoardError):
    status_code = 403
    default_message = "Only members invited to this board can vote"


class VoteLimitExceeded(MenuBoardError):
    status_code = 400
    default_message = "Each member can vote for at most 3 menus"


class DuplicateVote(MenuBoardError):
    status_code = 409
    default_message = "You already voted for this menu"


class NoVotesYet(MenuBoardError):
    status_code = 404
    default_message = "No votes have been cast on this board"
