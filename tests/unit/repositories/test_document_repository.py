"""
Unit Tests for the Document Repository.

Covers initialization, the corruption reset policy, whole-document
mutation and export/import.
"""

import json
from datetime import date

import pytest

from spaced_notes.core.exceptions import StorageError
from spaced_notes.repositories.document import (
    DEFAULT_DOCUMENT_KEY,
    DocumentRepository,
    parse_document,
    serialize_document,
)
from spaced_notes.schemas.note import Document, RepetitionStatus
from spaced_notes.services.scheduler import create_schedule


def _document_with_note(title="Mitosis", base=None) -> Document:
    note, repetitions = create_schedule(title, base)
    return Document(notes=[note], repetitions=repetitions)


class TestLoad:
    """Tests for loading and the corruption policy."""

    def test_initializes_empty_document_when_absent(self, repository, store):
        document = repository.load()

        assert document == Document.empty()
        assert json.loads(store.get(DEFAULT_DOCUMENT_KEY)) == {"notes": [], "repetitions": []}

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json at all",
            b'{"notes": "not-a-list", "repetitions": []}',
            b'{"notes": []}',
            b'{"notes": [{"id": "n1"}], "repetitions": []}',
            b"[]",
        ],
    )
    def test_corrupt_value_resets_to_empty(self, repository, store, raw):
        store.set(DEFAULT_DOCUMENT_KEY, raw)

        document = repository.load()

        assert document == Document.empty()
        assert parse_document(store.get(DEFAULT_DOCUMENT_KEY)) == Document.empty()

    def test_unknown_fields_are_ignored(self, repository, store):
        store.set(
            DEFAULT_DOCUMENT_KEY,
            b'{"notes": [], "repetitions": [], "version": 2}',
        )
        assert repository.load() == Document.empty()

    def test_storage_errors_propagate(self, failing_store):
        repository = DocumentRepository(failing_store)
        with pytest.raises(StorageError):
            repository.load()

    def test_custom_key(self, store):
        repository = DocumentRepository(store, key="other-db")
        repository.save(_document_with_note())
        assert store.get("other-db") is not None
        assert store.get(DEFAULT_DOCUMENT_KEY) is None


class TestSaveLoadRoundTrip:
    """save(d) then load() returns d."""

    def test_round_trip(self, repository, base_instant):
        document = _document_with_note(base=base_instant)

        repository.save(document)

        assert repository.load() == document

    def test_save_of_load_is_noop(self, repository, store, base_instant):
        repository.save(_document_with_note(base=base_instant))
        before = store.get(DEFAULT_DOCUMENT_KEY)

        repository.save(repository.load())

        assert repository.load() == parse_document(before)

    def test_on_disk_keys_are_camel_case(self, base_instant):
        data = json.loads(serialize_document(_document_with_note(base=base_instant)))

        assert set(data["notes"][0]) == {"id", "title", "createdAt", "archived", "attachment"}
        assert set(data["repetitions"][0]) == {
            "id", "noteId", "dueDate", "index", "status", "reviewedAt",
        }
        assert data["repetitions"][0]["status"] == "pending"


class TestMutate:
    """Tests for whole-document read-modify-write."""

    def test_in_place_transform_is_saved(self, repository, base_instant):
        repository.save(_document_with_note(base=base_instant))

        def mark_first_done(document):
            document.repetitions[0].status = RepetitionStatus.DONE

        saved = repository.mutate(mark_first_done)

        assert saved.repetitions[0].status == RepetitionStatus.DONE
        assert repository.load().repetitions[0].status == RepetitionStatus.DONE

    def test_returned_document_replaces_stored(self, repository, base_instant):
        repository.save(_document_with_note(base=base_instant))

        repository.mutate(lambda document: Document.empty())

        assert repository.load() == Document.empty()

    def test_transform_failure_leaves_store_untouched(self, repository, base_instant):
        original = _document_with_note(base=base_instant)
        repository.save(original)

        def explode(document):
            document.notes.clear()
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            repository.mutate(explode)

        assert repository.load() == original


class TestExportImport:
    """Tests for JSON export and strict import."""

    def test_export_is_pretty_printed(self, repository, base_instant):
        repository.save(_document_with_note(base=base_instant))

        exported = repository.export_json()

        assert exported.startswith("{\n")
        assert json.loads(exported)["notes"][0]["title"] == "Mitosis"

    def test_export_then_import_restores_document(self, store, base_instant):
        source = DocumentRepository(store)
        source.save(_document_with_note(base=base_instant))
        exported = source.export_json()

        target = DocumentRepository(type(store)())
        assert target.import_json(exported) is True
        assert target.load() == source.load()

    def test_bad_import_leaves_document_unchanged(self, repository, base_instant):
        original = _document_with_note(base=base_instant)
        repository.save(original)

        result = repository.import_json('{"notes": "not-a-list", "repetitions": []}')

        assert result is False
        assert repository.load() == original

    @pytest.mark.parametrize(
        "payload",
        ["", "{", "{}", "null", '{"notes": [], "repetitions": [{"id": "r1"}]}'],
    )
    def test_rejects_invalid_payloads(self, repository, payload):
        assert repository.import_json(payload) is False

    def test_accepts_legacy_data_url_field(self, repository):
        payload = {
            "notes": [
                {
                    "id": "n1",
                    "title": "Cell",
                    "createdAt": "2024-01-01T09:00:00.000Z",
                    "archived": False,
                    "attachment": {
                        "id": "a1",
                        "name": "cell.png",
                        "type": "image",
                        "dataUrl": "data:image/png;base64,AAAA",
                        "sizeBytes": 3,
                    },
                }
            ],
            "repetitions": [],
        }

        assert repository.import_json(json.dumps(payload)) is True

        attachment = repository.load().notes[0].attachment
        assert attachment.content == "data:image/png;base64,AAAA"
        assert "content" in json.loads(repository.export_json())["notes"][0]["attachment"]

    def test_offset_less_timestamps_load_as_local_instants(self, repository):
        payload = {
            "notes": [{"id": "n1", "title": "Cell", "createdAt": "2024-01-01T09:00:00"}],
            "repetitions": [
                {
                    "id": "r1",
                    "noteId": "n1",
                    "dueDate": "2024-01-02T09:00:00",
                    "index": 1,
                    "status": "done",
                    "reviewedAt": "2024-01-02T18:30:00",
                }
            ],
        }

        assert repository.import_json(json.dumps(payload)) is True

        document = repository.load()
        note, repetition = document.notes[0], document.repetitions[0]
        assert note.created_at.tzinfo is not None
        assert repetition.due_date.tzinfo is not None
        assert repetition.reviewed_at.tzinfo is not None
        assert (repetition.due_date.date(), repetition.due_date.hour) == (date(2024, 1, 2), 9)
        assert repetition.reviewed_at.hour == 18
