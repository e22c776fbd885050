"""Version ledger: name rules and index allocation for a category's saves."""

from __future__ import annotations

from datetime import datetime

from .errors import InvalidSaveName, SaveAlreadyExists, SaveNotFound
from .models import Category, Save


AUTO_TOKEN = "auto"


def is_position_token(token: str) -> bool:
    """True if ``token`` is a base-10 non-negative integer."""
    return token.isascii() and token.isdigit()


def validate_save_name(name: str) -> None:
    """Reject names the reference resolver could not tell apart from a position or the autosave.

    Raises:
        InvalidSaveName: If the name is empty, numeric or "auto"
    """
    if not name:
        raise InvalidSaveName(name, "save name must not be empty")
    if is_position_token(name):
        raise InvalidSaveName(name, "save name must not be numeric")
    if name == AUTO_TOKEN:
        raise InvalidSaveName(name, "save must not be named `auto`")


def find_by_name(category: Category, name: str) -> Save:
    """Get the save carrying ``name``.

    Raises:
        SaveNotFound: If no save in the category has that name
    """
    for save in category.saves:
        if save.display_name == name:
            return save
    raise SaveNotFound(name)


def register(
    category: Category,
    display_name: str | None = None,
    now: datetime | None = None,
) -> Save:
    """Append a new save to the category's ledger.

    Args:
        category: Owning category
        display_name: Optional unique name
        now: Creation time (defaults to datetime.now())

    Returns:
        The new Save, holding a freshly allocated real_index

    Raises:
        InvalidSaveName: If the name is numeric or "auto"
        SaveAlreadyExists: If the name is already taken in this category
    """
    if display_name is not None:
        validate_save_name(display_name)
        if any(s.display_name == display_name for s in category.saves):
            raise SaveAlreadyExists(display_name)

    timestamp = now or datetime.now()
    save = Save(
        real_index=category.next_index,
        created_at=timestamp.isoformat(timespec="seconds"),
        display_name=display_name,
    )
    category.next_index += 1
    category.saves.append(save)
    return save


def remove(category: Category, save: Save) -> None:
    """Drop ``save`` from the ledger.

    Positions of later saves shift down by one; their real_index values
    do not change, and the removed index is never handed out again.
    """
    for i, existing in enumerate(category.saves):
        if existing is save:
            del category.saves[i]
            return
    raise SaveNotFound(save.label)


def position_of(category: Category, save: Save) -> int:
    """Zero-based position of ``save`` in the category's current sequence."""
    for i, existing in enumerate(category.saves):
        if existing is save:
            return i
    raise SaveNotFound(save.label)
