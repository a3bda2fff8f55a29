"""Routes for reading and updating notification preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dapdip.application.use_cases.preferences import (
    get_group_preference as get_group_preference_uc,
    get_preferences as get_preferences_uc,
    list_category_preferences as list_category_preferences_uc,
    update_category_preference as update_category_preference_uc,
    update_group_preference as update_group_preference_uc,
    update_preferences as update_preferences_uc,
)
from dapdip.domain.entities import NotificationCategory, User
from dapdip.infrastructure.database import get_db
from dapdip.interfaces.api.dependencies import get_current_active_user
from dapdip.interfaces.api.schemas import (
    CategoryPreferenceRead,
    CategoryPreferenceUpdate,
    GroupPreferenceRead,
    GroupPreferenceUpdate,
    PreferencesRead,
    PreferencesUpdate,
)

router = APIRouter(prefix="/notifications/preferences", tags=["preferences"])


@router.get("", response_model=PreferencesRead)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return PreferencesRead.model_validate(get_preferences_uc(db, current_user.id))


@router.patch("", response_model=PreferencesRead)
def update_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Apply a partial update; fields not sent keep their value."""

    preferences = update_preferences_uc(
        db, current_user.id, **payload.model_dump(exclude_unset=True, exclude_none=True)
    )
    return PreferencesRead.model_validate(preferences)


@router.get("/categories", response_model=list[CategoryPreferenceRead])
def list_category_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return [
        CategoryPreferenceRead.model_validate(preference)
        for preference in list_category_preferences_uc(db, current_user.id)
    ]


@router.put("/categories/{category}", response_model=CategoryPreferenceRead)
def update_category_preference(
    category: NotificationCategory,
    payload: CategoryPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    preference = update_category_preference_uc(
        db, current_user.id, category, **payload.model_dump(exclude_none=True)
    )
    return CategoryPreferenceRead.model_validate(preference)


@router.get("/groups/{group_id}", response_model=GroupPreferenceRead)
def read_group_preference(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return GroupPreferenceRead.model_validate(
        get_group_preference_uc(db, current_user.id, group_id)
    )


@router.put("/groups/{group_id}", response_model=GroupPreferenceRead)
def update_group_preference(
    group_id: int,
    payload: GroupPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Store the switches sent for ``group_id``; omitted ones keep their value."""

    preference = update_group_preference_uc(
        db, current_user.id, group_id, **payload.model_dump(exclude_none=True)
    )
    return GroupPreferenceRead.model_validate(preference)
