# tests/test_core.py

import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from emoji_dictionary.core.emoji import (
    Category, ValidationError, categories, decode_emojis, encode_emojis, new_record, sample_records,
    share_text, validate_fields,
)
from emoji_dictionary.core.emoji_collection import EmojiCollection, FilterState
from emoji_dictionary.core.storage import STORE_KEY, MemoryStore, PersistenceError


class FailingStore(MemoryStore):
    """A store whose writes (and optionally reads) always fail."""

    def __init__(self, fail_reads=False):
        super().__init__()
        self.fail_reads = fail_reads

    def read(self, key):
        if self.fail_reads:
            raise PersistenceError("storage unavailable")
        return super().read(key)

    def write(self, key, value):
        raise PersistenceError("disk full")


class CountingStore(MemoryStore):
    """Counts the writes that reach the store."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, key, value):
        self.writes += 1
        super().write(key, value)


def stored_ids(store):
    return [e.id for e in decode_emojis(store.read(STORE_KEY))]


def ids(emojis):
    return [e.id for e in emojis]


@pytest.fixture
def five_records():
    """A, C, E are Food; B, D are Nature."""
    return {
        "A": new_record("🍎", "Apple", Category.FOOD),
        "B": new_record("🌲", "Pine", Category.NATURE),
        "C": new_record("🍕", "Pizza", Category.FOOD),
        "D": new_record("🌻", "Sunflower", Category.NATURE),
        "E": new_record("🍩", "Donut", Category.FOOD),
    }


@pytest.fixture
def collection(five_records):
    """A loaded collection holding [A, B, C, D, E] in a memory store."""
    store = MemoryStore({STORE_KEY: encode_emojis(five_records[k] for k in "ABCDE")})
    coll = EmojiCollection(store)
    coll.load()
    return coll


# --- Tests for the record store ---

def test_categories_are_fixed_and_ordered():
    assert [c.value for c in categories()] == ["Smileys", "Nature", "Food", "Objects", "Symbols"]


def test_new_record_copies_fields_and_generates_ids():
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    first = new_record("🍕", "Pizza", Category.FOOD, is_favorite=True, created_at=created)
    second = new_record("🍕", "Pizza", Category.FOOD, is_favorite=True, created_at=created)

    assert (first.symbol, first.description, first.category) == ("🍕", "Pizza", Category.FOOD)
    assert first.is_favorite is True
    assert first.created_at == created
    assert isinstance(first.id, uuid.UUID)
    assert first.id != second.id


def test_new_record_defaults():
    before = datetime.now(timezone.utc)
    emoji = new_record("🙂", "Smile", Category.SMILEYS)
    assert emoji.is_favorite is False
    assert before <= emoji.created_at <= datetime.now(timezone.utc)


def test_equality_is_defined_by_id():
    emoji = new_record("🙂", "Smile", Category.SMILEYS)
    edited = emoji.with_changes(description="Slight smile", is_favorite=True)
    twin = new_record("🙂", "Smile", Category.SMILEYS, created_at=emoji.created_at)

    assert edited == emoji
    assert hash(edited) == hash(emoji)
    assert twin != emoji


def test_identity_fields_cannot_be_changed():
    emoji = new_record("🙂", "Smile", Category.SMILEYS)
    with pytest.raises(TypeError):
        emoji.with_changes(id=uuid.uuid4())
    with pytest.raises(TypeError):
        emoji.with_changes(created_at=datetime.now(timezone.utc))


def test_sample_records():
    samples = sample_records()
    now = datetime.now(timezone.utc)

    assert len(samples) == 10
    assert [e.symbol for e in samples] == ["😀", "❤️", "🍕", "🌳", "⚽", "🎵", "🚗", "🌙", "🎉", "☕"]
    assert {e.category for e in samples} == set(Category)
    assert {e.is_favorite for e in samples} == {True, False}
    assert all(now - timedelta(days=7, minutes=1) <= e.created_at <= now for e in samples)
    created = [e.created_at for e in samples]
    assert created == sorted(created)
    # Every call hands out brand new ids.
    assert not set(ids(samples)) & set(ids(sample_records()))


def test_share_text():
    emoji = new_record("🍕", "Pizza", Category.FOOD)
    assert share_text(emoji) == "🍕 - Pizza"


def test_validate_fields_normalizes():
    assert validate_fields(" 🍕 ", "  Pizza \n", "food") == ("🍕", "Pizza", Category.FOOD)


@pytest.mark.parametrize("symbol, description, category", [
    ("", "Pizza", "Food"),
    ("🍕", "", "Food"),
    ("🍕", "   \n\t", "Food"),
    ("🍕", "Pizza", "Drinks"),
    ("🍕", "Pizza", None),
])
def test_validate_fields_rejects(symbol, description, category):
    with pytest.raises(ValidationError):
        validate_fields(symbol, description, category)


# --- Tests for loading and persistence ---

def test_load_bootstraps_sample_data_into_empty_store():
    store = MemoryStore()
    coll = EmojiCollection(store)

    assert coll.load() is False
    assert len(coll) == 10
    assert [e.symbol for e in coll.emojis][:3] == ["😀", "❤️", "🍕"]
    assert stored_ids(store) == ids(coll.emojis)


def test_load_uses_stored_collection_in_order(collection, five_records):
    reloaded = EmojiCollection(collection.store)
    assert reloaded.load() is True
    assert ids(reloaded.emojis) == ids(five_records[k] for k in "ABCDE")


def test_load_treats_malformed_data_as_first_run(caplog):
    store = MemoryStore({STORE_KEY: "{not json"})
    coll = EmojiCollection(store)

    with caplog.at_level(logging.WARNING):
        assert coll.load() is False

    assert len(coll) == 10
    assert stored_ids(store) == ids(coll.emojis)
    assert "could not be decoded" in caplog.text


def test_load_survives_unreadable_store():
    coll = EmojiCollection(FailingStore(fail_reads=True))
    coll.load()
    assert len(coll) == 10
    assert isinstance(coll.last_persistence_error, PersistenceError)


def test_write_failures_are_not_fatal(caplog):
    coll = EmojiCollection(FailingStore())
    with caplog.at_level(logging.WARNING):
        coll.load()
        added = coll.add(new_record("🦄", "Unicorn", Category.NATURE))

    assert coll.emojis[-1] == added
    assert isinstance(coll.last_persistence_error, PersistenceError)
    assert "Could not persist the collection" in caplog.text


def test_successful_save_clears_last_error():
    store = FailingStore()
    coll = EmojiCollection(store)
    coll.load()
    assert coll.last_persistence_error is not None

    coll.store = MemoryStore()
    coll.toggle_favorite(coll.emojis[0].id)
    assert coll.last_persistence_error is None


# --- Tests for the filtered view ---

def test_filtered_view_without_filter_returns_everything(collection):
    assert collection.filtered_view() == collection.emojis
    assert not collection.is_filtering


def test_filtered_view_by_category(collection, five_records):
    view = collection.filtered_view(FilterState(category=Category.NATURE))
    assert ids(view) == ids([five_records["B"], five_records["D"]])


def test_search_is_case_insensitive_over_description_symbol_and_category(collection, five_records):
    assert ids(collection.filtered_view(FilterState("PIZ"))) == [five_records["C"].id]
    assert ids(collection.filtered_view(FilterState("🌻"))) == [five_records["D"].id]
    assert len(collection.filtered_view(FilterState("food"))) == 3


def test_search_and_category_combine(collection, five_records):
    assert ids(collection.filtered_view(FilterState("nut", Category.FOOD))) == [five_records["E"].id]
    assert ids(collection.filtered_view(FilterState("pi", Category.NATURE))) == [five_records["B"].id]


def test_filtered_view_never_returns_non_matching_records():
    coll = EmojiCollection(MemoryStore())
    coll.load()
    for category in list(categories()) + [None]:
        for text in ["", "a", "MOON", "🍕", "symbols", "zzz"]:
            state = FilterState(text, category)
            for emoji in coll.filtered_view(state):
                if category is not None:
                    assert emoji.category == category
                if text:
                    needle = text.lower()
                    assert (needle in emoji.description.lower() or needle in emoji.symbol.lower()
                            or needle in emoji.category.value.lower())


def test_filter_state_is_owned_by_the_collection(collection, five_records):
    collection.set_category("nature")
    assert collection.is_filtering
    assert ids(collection.filtered_view()) == ids([five_records["B"], five_records["D"]])

    collection.set_search_text("sun")
    assert ids(collection.filtered_view()) == [five_records["D"].id]

    collection.clear_filter()
    assert len(collection.filtered_view()) == 5

    collection.set_filter("pi", "Food")
    assert ids(collection.filtered_view()) == [five_records["C"].id]


def test_set_category_rejects_unknown_names(collection):
    with pytest.raises(ValidationError):
        collection.set_category("Vehicles")


def test_filter_state_accepts_category_names(collection, five_records):
    by_name = FilterState("", "food")

    assert by_name.category is Category.FOOD
    assert by_name == FilterState(category=Category.FOOD)
    assert ids(collection.filtered_view(by_name)) == ids(five_records[k] for k in "ACE")

    assert collection.remove_at([1], FilterState(category="Nature")) == 1
    assert five_records["D"] not in collection.emojis


def test_filter_state_rejects_unknown_category_names():
    with pytest.raises(ValidationError):
        FilterState(category="Vehicles")


# --- Tests for mutations ---

def test_add_appends_and_persists(collection):
    emoji = new_record("🦄", "  Unicorn  ", Category.NATURE)
    added = collection.add(emoji)

    assert collection.emojis[-1] == emoji
    assert added.description == "Unicorn"
    assert stored_ids(collection.store)[-1] == emoji.id


def test_add_rejects_invalid_records(collection):
    with pytest.raises(ValidationError):
        collection.add(new_record("🦄", "   ", Category.NATURE))
    with pytest.raises(ValidationError):
        collection.add(collection.emojis[0])
    assert len(collection) == 5


def test_add_all_saves_once(five_records):
    store = CountingStore()
    coll = EmojiCollection(store)
    coll.load()
    writes_after_load = store.writes

    added = coll.add_all([five_records["A"], new_record("🦄", "  Unicorn  ", Category.NATURE)])

    assert store.writes == writes_after_load + 1
    assert [e.description for e in added] == ["Apple", "Unicorn"]
    assert stored_ids(store)[-2:] == ids(added)


def test_add_all_is_all_or_nothing(collection, five_records):
    fresh = new_record("🦄", "Unicorn", Category.NATURE)
    with pytest.raises(ValidationError):
        collection.add_all([fresh, new_record("🦄", "  ", Category.NATURE)])
    with pytest.raises(ValidationError):
        collection.add_all([fresh, fresh])
    assert len(collection) == 5
    assert collection.add_all([]) == []


def test_remove_by_id_is_idempotent(collection, five_records):
    target = five_records["C"].id

    assert collection.remove_by_id(target) is True
    after_first = ids(collection.emojis)
    assert collection.remove_by_id(target) is False
    assert ids(collection.emojis) == after_first
    assert target not in stored_ids(collection.store)


def test_remove_at_maps_filtered_indices_to_records(collection, five_records):
    removed = collection.remove_at({1}, FilterState(category=Category.NATURE))

    assert removed == 1
    expected = ids(five_records[k] for k in "ABCE")
    assert ids(collection.emojis) == expected
    assert stored_ids(collection.store) == expected


def test_remove_at_uses_the_active_filter_by_default(collection, five_records):
    collection.set_category(Category.NATURE)
    collection.remove_at([0])
    assert five_records["B"] not in collection.emojis
    assert five_records["A"] in collection.emojis


def test_remove_at_rejects_out_of_range_without_mutating(collection):
    before = ids(collection.emojis)
    with pytest.raises(IndexError):
        collection.remove_at({0, 2}, FilterState(category=Category.NATURE))
    with pytest.raises(IndexError):
        collection.remove_at({-1})
    assert ids(collection.emojis) == before


@pytest.mark.parametrize("sources, destination, expected", [
    ({0}, 2, "BACDE"),
    ({0}, 5, "BCDEA"),
    ({4}, 0, "EABCD"),
    ({3, 4}, 0, "DEABC"),
    ({1, 3}, 3, "ACBDE"),
    ({2}, 2, "ABCDE"),
])
def test_move_reorders_unfiltered_collection(collection, five_records, sources, destination, expected):
    assert collection.move(sources, destination) is True
    assert ids(collection.emojis) == ids(five_records[k] for k in expected)
    assert stored_ids(collection.store) == ids(collection.emojis)


def test_move_is_ignored_while_filtered(collection, five_records):
    collection.set_category(Category.NATURE)
    before = ids(collection.emojis)

    assert collection.move({0}, 1) is False
    assert ids(collection.emojis) == before
    food = [e for e in collection.emojis if e.category == Category.FOOD]
    assert ids(food) == ids(five_records[k] for k in "ACE")


def test_move_rejects_out_of_range(collection):
    with pytest.raises(IndexError):
        collection.move({5}, 0)
    with pytest.raises(IndexError):
        collection.move({0}, 6)


def test_toggle_favorite_twice_restores(collection, five_records):
    target = five_records["A"].id
    assert collection.get(target).is_favorite is False

    collection.toggle_favorite(target)
    assert collection.get(target).is_favorite is True
    assert decode_emojis(collection.store.read(STORE_KEY))[0].is_favorite is True

    collection.toggle_favorite(str(target))
    assert collection.get(target).is_favorite is False


def test_id_operations_ignore_unknown_ids(collection):
    before = ids(collection.emojis)
    assert collection.toggle_favorite(uuid.uuid4()) is False
    assert collection.update_description("not-a-uuid", "Whatever") is False
    assert collection.duplicate(uuid.uuid4()) is None
    assert collection.get("nonsense") is None
    assert ids(collection.emojis) == before


def test_update_description(collection, five_records):
    target = five_records["B"]
    assert collection.update_description(target.id, "  Pine tree ") is True

    updated = collection.get(target.id)
    assert updated.description == "Pine tree"
    assert updated.created_at == target.created_at
    assert ids(collection.emojis).index(target.id) == 1


def test_update_description_rejects_blank_text(collection, five_records):
    with pytest.raises(ValidationError):
        collection.update_description(five_records["B"].id, "  ")
    assert collection.get(five_records["B"].id).description == "Pine"


def test_duplicate_appends_a_fresh_copy(collection, five_records):
    pizza = five_records["C"]
    collection.toggle_favorite(pizza.id)

    copy = collection.duplicate(pizza.id)

    assert collection.emojis[-1] is copy
    assert copy.symbol == "🍕"
    assert copy.description == "Pizza (Copy)"
    assert copy.category == Category.FOOD
    assert copy.is_favorite is False
    assert copy.id != pizza.id
    assert copy.created_at >= pizza.created_at
    assert len(collection) == 6
    assert stored_ids(collection.store)[-1] == copy.id


def test_reset_to_sample(collection):
    old_ids = set(ids(collection.emojis))
    collection.reset_to_sample()

    assert len(collection) == 10
    assert not old_ids & set(ids(collection.emojis))
    assert stored_ids(collection.store) == ids(collection.emojis)
