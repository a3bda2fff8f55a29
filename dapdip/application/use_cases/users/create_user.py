"""Use case for creating users."""

from sqlalchemy.orm import Session

from dapdip.domain.entities import User
from dapdip.infrastructure.repositories import UserRepository
from dapdip.utils import now_in_app_naive_datetime


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    image_url: str | None = None,
    is_admin: bool = False,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    email = email.strip().lower()
    if not name.strip():
        raise ValueError("Name is required")
    if repository.get_by_email(email):
        raise ValueError("Email is already registered")

    user = User(
        id=None,
        name=name.strip(),
        email=email,
        image_url=image_url,
        is_active=True,
        is_admin=is_admin,
        created_at=now_in_app_naive_datetime(),
    )
    return repository.create(user)
