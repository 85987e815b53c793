# emoji_dictionary/core/emoji.py

import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, List, Tuple

logger = logging.getLogger(__name__)

# Suffix appended to the description of a duplicated record.
COPY_MARKER = " (Copy)"

# Numeric createdDate values count seconds from this instant (the Cocoa reference date).
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)


# --- Errors and Categories ---

class ValidationError(ValueError):
    """Raised when a record's fields are not acceptable for creation or edit."""


class Category(Enum):
    """
    The closed set of categories a record can belong to.
    The declaration order is the order shown in filter pickers.
    """
    SMILEYS = "Smileys"
    NATURE = "Nature"
    FOOD = "Food"
    OBJECTS = "Objects"
    SYMBOLS = "Symbols"

    def __str__(self) -> str:
        return self.value


# --- The Record ---

@dataclass(frozen=True, eq=False)
class Emoji:
    """
    One entry of the dictionary: an emoji glyph plus its descriptive metadata.

    Instances are immutable. The collection manager "edits" a record by swapping
    in a copy made with `dataclasses.replace`, so `id` and `created_at` survive
    every edit untouched.

    Two records are equal when their ids are equal, whatever the other fields say.
    """
    symbol: str
    description: str
    category: Category
    is_favorite: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        # Naive timestamps are taken to be UTC, which is how they are stored.
        # Normalizing here keeps a record equal field by field to its decoded copy.
        if self.created_at.tzinfo is None:
            object.__setattr__(self, "created_at", self.created_at.replace(tzinfo=timezone.utc))

    def __eq__(self, other):
        if not isinstance(other, Emoji):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def with_changes(self, **changes) -> "Emoji":
        """Returns a copy of this record with the given mutable fields replaced."""
        if "id" in changes or "created_at" in changes:
            raise TypeError("'id' and 'created_at' cannot be changed after creation")
        return replace(self, **changes)


# --- Record Construction ---

def new_record(symbol: str, description: str, category: Category, is_favorite: bool = False,
               created_at: datetime | None = None) -> Emoji:
    """
    Creates a record with a freshly generated id.

    Args:
        symbol: The emoji glyph itself.
        description: Free text describing the emoji.
        category: One of the values returned by `categories()`.
        is_favorite: Initial favorite flag.
        created_at: Creation timestamp; defaults to the current UTC time. A naive
            value is read as UTC.
    """
    return Emoji(
        symbol=symbol,
        description=description,
        category=category,
        is_favorite=is_favorite,
        created_at=created_at if created_at is not None else datetime.now(timezone.utc),
    )


def categories() -> Tuple[Category, ...]:
    """Returns the five categories in their stable display order."""
    return tuple(Category)


def parse_category(value) -> Category:
    """Turns a category name (any letter case) or a Category into a Category."""
    if isinstance(value, Category):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for category in Category:
            if category.value.lower() == wanted:
                return category
    raise ValidationError(f"Unknown category: {value!r}. Expected one of: "
                          f"{', '.join(c.value for c in Category)}.")


def validate_description(text: str) -> str:
    """Returns the trimmed description, or raises ValidationError if nothing is left."""
    description = (text or "").strip()
    if not description:
        raise ValidationError("The description cannot be empty.")
    return description


def validate_fields(symbol: str, description: str, category) -> Tuple[str, str, Category]:
    """
    Checks the user-editable fields of a record before it is created or edited.

    Returns:
        The normalized (symbol, description, category) triple, with the
        description trimmed of surrounding whitespace.

    Raises:
        ValidationError: if the symbol is empty, the description is blank,
            or the category is not one of the known categories.
    """
    symbol = (symbol or "").strip()
    if not symbol:
        raise ValidationError("An emoji symbol is required.")
    return symbol, validate_description(description), parse_category(category)


def share_text(emoji: Emoji) -> str:
    """Formats a record the way it is copied to the clipboard or shared."""
    return f"{emoji.symbol} - {emoji.description}"


def duplicate_of(emoji: Emoji) -> Emoji:
    """Builds a fresh, non-favorite copy of a record, stamped with the current time."""
    return new_record(
        symbol=emoji.symbol,
        description=emoji.description + COPY_MARKER,
        category=emoji.category,
        is_favorite=False,
    )


def sample_records() -> List[Emoji]:
    """
    Returns the ten records a brand new dictionary starts with.

    Every call generates new ids; the timestamps are staggered from seven days
    ago up to now.
    """
    now = datetime.now(timezone.utc)
    day = timedelta(days=1)
    hour = timedelta(hours=1)
    seed = [
        ("😀", "Grinning face - Expresses happiness and joy", Category.SMILEYS, True, now - 7 * day),
        ("❤️", "Red heart - Deep love and affection", Category.SYMBOLS, True, now - 6 * day),
        ("🍕", "Pizza - Everyone's favorite Italian food", Category.FOOD, False, now - 5 * day),
        ("🌳", "Tree - Nature and the environment", Category.NATURE, False, now - 4 * day),
        ("⚽", "Soccer ball - The most popular sport in the world", Category.OBJECTS, True, now - 3 * day),
        ("🎵", "Musical note - Music and melodies", Category.SYMBOLS, False, now - 2 * day),
        ("🚗", "Car - Transport and vehicles", Category.OBJECTS, False, now - day),
        ("🌙", "Moon - Night and astronomy", Category.NATURE, True, now - 12 * hour),
        ("🎉", "Party popper - Celebrations and parties", Category.SYMBOLS, False, now - 6 * hour),
        ("☕", "Coffee - The energizing morning drink", Category.FOOD, True, now),
    ]
    return [new_record(symbol, description, category, favorite, created)
            for symbol, description, category, favorite, created in seed]


# --- JSON Wire Format ---
# A stored collection is a JSON array of objects with the keys
# id, emoji, description, category, isFavorite and createdDate.

def _encode_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _decode_date(value) -> datetime:
    if isinstance(value, bool):
        raise ValueError(f"Invalid createdDate: {value!r}")
    # Numbers are seconds since the reference date.
    if isinstance(value, (int, float)):
        return REFERENCE_DATE + timedelta(seconds=value)
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only learned to read "Z" in Python 3.11.
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"Invalid createdDate: {value!r}")


def emoji_to_dict(emoji: Emoji) -> dict:
    return {
        "id": str(emoji.id),
        "emoji": emoji.symbol,
        "description": emoji.description,
        "category": emoji.category.value,
        "isFavorite": emoji.is_favorite,
        "createdDate": _encode_date(emoji.created_at),
    }


def emoji_from_dict(data: dict) -> Emoji:
    """
    Rebuilds a record from its stored form.

    Raises:
        ValueError: if a key is missing or holds a value of the wrong type.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object for a record, got {type(data).__name__}")
    try:
        symbol = data["emoji"]
        description = data["description"]
        is_favorite = data["isFavorite"]
        if not isinstance(symbol, str) or not isinstance(description, str):
            raise ValueError("'emoji' and 'description' must be strings")
        if not isinstance(is_favorite, bool):
            raise ValueError("'isFavorite' must be a boolean")
        return Emoji(
            id=uuid.UUID(str(data["id"])),
            symbol=symbol,
            description=description,
            category=Category(data["category"]),
            is_favorite=is_favorite,
            created_at=_decode_date(data["createdDate"]),
        )
    except KeyError as e:
        raise ValueError(f"Stored record is missing the {e} field") from e
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Stored record is malformed: {e}") from e


def encode_emojis(emojis: Iterable[Emoji]) -> str:
    """Serializes a collection to its JSON text form, preserving order."""
    return json.dumps([emoji_to_dict(e) for e in emojis], ensure_ascii=False)


def decode_emojis(text: str) -> List[Emoji]:
    """
    Parses the JSON text produced by `encode_emojis`.

    Raises:
        ValueError: on malformed JSON or records that cannot be rebuilt.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of records, got {type(data).__name__}")
    emojis = [emoji_from_dict(item) for item in data]
    # Ids are the identity of a record; two records sharing one would be ambiguous.
    if len({e.id for e in emojis}) != len(emojis):
        raise ValueError("Stored collection contains duplicate ids")
    logger.debug(f"Decoded {len(emojis)} stored records.")
    return emojis
