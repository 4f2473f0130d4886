"""In-memory library store and export filenames."""

from __future__ import annotations

import re

from conftest import study_document
from app.services.library_store import LibraryStore, export_filename
from app.services.response_contract import GeneratedContent


def _content(title: str = "Notes") -> GeneratedContent:
    return GeneratedContent.model_validate(study_document(title=title))


def test_save_stamps_id_and_display_date():
    store = LibraryStore()

    entry = store.save(_content())

    assert re.fullmatch(r"[0-9a-f]{32}", entry.id)
    assert re.fullmatch(r"[A-Z][a-z]{2} \d{2}, \d{4}", entry.date)
    assert store.get(entry.id) is entry


def test_oldest_entries_are_dropped_past_capacity():
    store = LibraryStore(max_entries=2)
    first = store.save(_content("one"))
    second = store.save(_content("two"))
    third = store.save(_content("three"))

    assert [entry.id for entry in store.list()] == [third.id, second.id]
    assert store.get(first.id) is None


def test_delete_reports_whether_entry_existed():
    store = LibraryStore()
    entry = store.save(_content())

    assert store.delete(entry.id) is True
    assert store.delete(entry.id) is False


def test_export_filename():
    assert export_filename("Intro to Thermodynamics: Part 1") == "intro_to_thermodynamics__part_1.json"
    assert export_filename("Done!") == "done_.json"
    assert export_filename("") == "study_notes.json"
