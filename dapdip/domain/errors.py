"""Exceptions raised by use cases and translated at the HTTP boundary."""

from __future__ import annotations


TOKEN_LIMIT_EXCEEDED = "TOKEN_LIMIT_EXCEEDED"


class TokenLimitExceededError(RuntimeError):
    """Raised when an operation does not fit in the user's token budget."""

    code = TOKEN_LIMIT_EXCEEDED

    def __init__(
        self,
        *,
        required: int,
        remaining: int,
        tier: str | None = None,
        message: str | None = None,
    ) -> None:
        self.required = required
        self.remaining = remaining
        self.tier = tier
        self.message = message or (
            "You have reached your token limit. "
            "Please upgrade your plan or wait for your limit to reset."
        )
        super().__init__(self.message)

    def to_detail(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "required": self.required,
            "remaining": self.remaining,
        }


class NotificationNotFoundError(LookupError):
    """Raised when a notification does not exist for the requesting user."""


__all__ = [
    "NotificationNotFoundError",
    "TOKEN_LIMIT_EXCEEDED",
    "TokenLimitExceededError",
]
