"""Save references: turning a user token into a concrete save.

A token is read as, in order:

1. a base-10 non-negative integer -> zero-based position in the current sequence
2. the literal "auto"             -> the category's autosave slot
3. anything else                  -> exact display name
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union, cast

from . import ledger
from .errors import NoAutosaveAvailable, SaveNotFound
from .models import Category, Save


@dataclass(frozen=True, slots=True)
class ByPosition:
    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True, slots=True)
class ByAuto:
    def __str__(self) -> str:
        return ledger.AUTO_TOKEN


@dataclass(frozen=True, slots=True)
class ByName:
    name: str

    def __str__(self) -> str:
        return self.name


SaveRef = Union[ByPosition, ByAuto, ByName]


class _Autosave:
    """Sentinel returned when a reference selects the autosave slot."""

    _instance: _Autosave | None = None

    def __new__(cls) -> _Autosave:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "AUTOSAVE"


AUTOSAVE = _Autosave()


def parse_reference(token: str) -> SaveRef:
    """Classify a raw token. Never fails; resolution does the checking."""
    if ledger.is_position_token(token):
        return ByPosition(int(token))
    if token == ledger.AUTO_TOKEN:
        return ByAuto()
    return ByName(token)


def resolve(category: Category, ref: SaveRef, allow_auto: bool = False) -> Save | _Autosave:
    """Resolve a parsed reference against the category's current saves.

    Args:
        category: Category owning the saves
        ref: Parsed reference
        allow_auto: Whether the autosave slot is an acceptable target

    Returns:
        The referenced Save, or AUTOSAVE

    Raises:
        SaveNotFound: Position out of range, unknown name, or "auto" where not allowed
        NoAutosaveAvailable: "auto" requested but no autosave exists
    """
    if isinstance(ref, ByPosition):
        if ref.index < len(category.saves):
            return category.saves[ref.index]
        raise SaveNotFound(str(ref.index))

    if isinstance(ref, ByAuto):
        if not allow_auto:
            raise SaveNotFound(ledger.AUTO_TOKEN)
        if not category.has_autosave:
            raise NoAutosaveAvailable(category.name)
        return AUTOSAVE

    if isinstance(ref, ByName):
        return ledger.find_by_name(category, ref.name)

    raise TypeError(f"Unknown save reference: {ref!r}")


def resolve_save(category: Category, token: str) -> Save:
    """Resolve a token that must name a numbered save."""
    return cast(Save, resolve(category, parse_reference(token), allow_auto=False))


def resolve_many(category: Category, tokens: Iterable[str]) -> list[Save]:
    """Resolve a batch of removal tokens in order.

    Each token is resolved against the sequence as it will look after the
    previous tokens' saves are gone, so ``["0", "0"]`` selects the first two
    saves. The category itself is not modified.
    """
    remaining = list(category.saves)
    view = Category(
        name=category.name,
        tracked_paths=category.tracked_paths,
        saves=remaining,
        autosave_marker=category.autosave_marker,
        next_index=category.next_index,
    )

    selected: list[Save] = []
    for token in tokens:
        save = resolve_save(view, token)
        remaining[:] = [s for s in remaining if s is not save]
        selected.append(save)
    return selected
