# tests/test_importer.py

import pytest

from emoji_dictionary.core.bulk_importer import BulkImporter
from emoji_dictionary.core.emoji import Category
from emoji_dictionary.core.emoji_collection import EmojiCollection
from emoji_dictionary.core.storage import MemoryStore


@pytest.fixture
def collection():
    coll = EmojiCollection(MemoryStore())
    coll.load()
    return coll


class CountingStore(MemoryStore):
    """Counts the writes that reach the store."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, key, value):
        self.writes += 1
        super().write(key, value)


def write_csv(tmp_path, text):
    path = tmp_path / "emojis.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_import_adds_valid_rows(tmp_path, collection):
    csv_path = write_csv(tmp_path, (
        "emoji,description,category,favorite\n"
        "🦄,Unicorn - Magic and fantasy,nature,yes\n"
        "📚,Books - Reading,Objects,\n"
    ))
    importer = BulkImporter(collection)
    importer.process_csv(csv_path)

    assert len(importer.report["added"]) == 2
    assert importer.report["errors"] == []
    unicorn, books = collection.emojis[-2:]
    assert (unicorn.symbol, unicorn.category, unicorn.is_favorite) == ("🦄", Category.NATURE, True)
    assert (books.description, books.is_favorite) == ("Books - Reading", False)


def test_import_reports_errors_and_duplicates(tmp_path, collection):
    pizza = collection.emojis[2]
    csv_path = write_csv(tmp_path, (
        "emoji,description,category\n"
        f"{pizza.symbol},{pizza.description},Food\n"
        "🍔,,Food\n"
        "🚀,Rocket,Vehicles\n"
        "🌮,Taco,Food\n"
    ))
    importer = BulkImporter(collection)
    importer.process_csv(csv_path)

    assert len(importer.report["duplicates"]) == 1
    assert [message.split(":")[0] for message in importer.report["errors"]] == ["Row 3", "Row 4"]
    assert importer.report["added"] == ["🌮 'Taco' (Food)"]
    assert len(collection) == 11


def test_import_requires_columns(tmp_path, collection):
    csv_path = write_csv(tmp_path, "symbol,text\n🍕,Pizza\n")
    importer = BulkImporter(collection)
    importer.process_csv(csv_path)

    assert importer.report["added"] == []
    assert "Missing required columns" in importer.report["errors"][0]
    assert len(collection) == 10


def test_import_rejects_unreadable_favorite_flag(tmp_path, collection):
    csv_path = write_csv(tmp_path, "emoji,description,category,favorite\n🍕,Pizza,Food,maybe\n")
    importer = BulkImporter(collection)
    importer.process_csv(csv_path)

    assert importer.report["errors"] and importer.report["added"] == []


def test_import_writes_the_store_once(tmp_path):
    store = CountingStore()
    coll = EmojiCollection(store)
    coll.load()
    writes_after_load = store.writes
    csv_path = write_csv(tmp_path, (
        "emoji,description,category\n"
        "🦄,Unicorn,Nature\n"
        "🌮,Taco,Food\n"
        "🦄,Unicorn,Nature\n"
        "📚,Books,Objects\n"
    ))
    importer = BulkImporter(coll)
    importer.process_csv(csv_path)

    assert store.writes == writes_after_load + 1
    assert len(importer.report["added"]) == 3
    assert importer.report["duplicates"] == ["Row 4: 🦄 'Unicorn' already exists."]
    assert [e.symbol for e in coll.emojis[-3:]] == ["🦄", "🌮", "📚"]


def test_import_with_nothing_new_does_not_write(tmp_path):
    store = CountingStore()
    coll = EmojiCollection(store)
    coll.load()
    writes_after_load = store.writes
    importer = BulkImporter(coll)
    importer.process_csv(write_csv(tmp_path, "emoji,description,category\n🍔,,Food\n"))

    assert store.writes == writes_after_load
    assert len(importer.report["errors"]) == 1
