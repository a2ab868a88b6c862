import json
import os
import stat
import threading
from datetime import datetime, timezone

import pytest
from django.db import DatabaseError, models

from contacts.exceptions import StorageError
from contacts.models import ContactSubmission
from contacts.records import ContactRecord
from contacts.storage import DatabaseStorage, JsonFileStorage


def make_record(name="Ana", email="ana@x.com", message="Hola", **kwargs):
    return ContactRecord(name=name, email=email, message=message, **kwargs)


def read_file(path):
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def test_missing_file_is_an_empty_collection(tmp_path):
    storage = JsonFileStorage(tmp_path / "contacts.json")
    assert storage.load() == []


def test_append_creates_file_and_parent_directory(tmp_path):
    path = tmp_path / "data" / "contacts.json"
    stored_id = JsonFileStorage(path).append(make_record())

    records = read_file(path)
    assert len(records) == 1
    assert records[0]["id"] == stored_id
    assert set(records[0]) == {"id", "name", "email", "message", "receivedAt"}


def test_stored_record_holds_submitted_fields_and_arrival_time(tmp_path):
    path = tmp_path / "contacts.json"
    arrival = datetime.now(timezone.utc)

    JsonFileStorage(path).append(make_record())

    [stored] = read_file(path)
    assert (stored["name"], stored["email"], stored["message"]) == ("Ana", "ana@x.com", "Hola")
    assert isinstance(stored["id"], int)
    assert datetime.fromisoformat(stored["receivedAt"]) >= arrival


def test_sequential_appends_keep_submission_order(tmp_path):
    path = tmp_path / "contacts.json"
    storage = JsonFileStorage(path)

    previous = []
    for i in range(5):
        storage.append(make_record(name=f"visitor {i}"))
        current = read_file(path)
        assert current[:-1] == previous
        previous = current

    assert [r["name"] for r in previous] == [f"visitor {i}" for i in range(5)]


def test_ids_are_unique_and_increasing_within_the_same_millisecond(tmp_path):
    storage = JsonFileStorage(tmp_path / "contacts.json")
    same_instant = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    ids = [storage.append(make_record(received_at=same_instant)) for _ in range(3)]

    assert ids == sorted(set(ids))
    assert ids[0] == int(same_instant.timestamp() * 1000)


def test_non_ascii_text_is_written_verbatim(tmp_path):
    path = tmp_path / "contacts.json"
    JsonFileStorage(path).append(make_record(message="¿Podemos hablar mañana?"))

    assert "¿Podemos hablar mañana?" in path.read_text(encoding="utf-8")


def test_append_keeps_the_existing_file_mode(tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text("[]", encoding="utf-8")
    os.chmod(path, 0o644)

    JsonFileStorage(path).append(make_record())

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644


def test_new_file_gets_the_umask_default_mode(tmp_path):
    path = tmp_path / "contacts.json"
    umask = os.umask(0o022)
    try:
        JsonFileStorage(path).append(make_record())
    finally:
        os.umask(umask)

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644


def test_invalid_json_is_a_storage_error(tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStorage(path).append(make_record())


def test_json_document_that_is_not_a_list_is_a_storage_error(tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text('{"id": 1}', encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStorage(path).append(make_record())


def test_unreadable_path_is_a_storage_error(tmp_path):
    with pytest.raises(StorageError):
        JsonFileStorage(tmp_path).append(make_record())


def test_failed_append_leaves_existing_records_untouched(tmp_path):
    path = tmp_path / "contacts.json"
    storage = JsonFileStorage(path)
    storage.append(make_record(name="first"))
    before = path.read_text(encoding="utf-8")

    path.write_text(before[:-5], encoding="utf-8")
    with pytest.raises(StorageError):
        storage.append(make_record(name="second"))

    assert path.read_text(encoding="utf-8") == before[:-5]


def test_unlocked_concurrent_submissions_can_lose_an_update(tmp_path, monkeypatch):
    path = tmp_path / "contacts.json"
    storage = JsonFileStorage(path, lock=False)
    both_loaded = threading.Barrier(2, timeout=5)
    original_load = storage.load

    def load_then_wait():
        records = original_load()
        both_loaded.wait()
        return records

    monkeypatch.setattr(storage, "load", load_then_wait)

    threads = [
        threading.Thread(target=storage.append, args=(make_record(name=name),))
        for name in ("Ana", "Luis")
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(read_file(path)) == 1


def test_locked_storage_keeps_every_concurrent_submission(tmp_path):
    path = tmp_path / "contacts.json"
    storage = JsonFileStorage(path)

    threads = [
        threading.Thread(target=storage.append, args=(make_record(name=f"visitor {i}"),))
        for i in range(10)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = read_file(path)
    assert len(records) == 10
    assert len({r["id"] for r in records}) == 10


@pytest.mark.django_db
def test_database_storage_inserts_one_row_and_returns_its_key():
    stored_id = DatabaseStorage().append(make_record())

    submission = ContactSubmission.objects.get(pk=stored_id)
    assert (submission.name, submission.email, submission.message) == ("Ana", "ana@x.com", "Hola")
    assert submission.received_at is not None


@pytest.mark.django_db
def test_database_storage_keys_are_unique():
    storage = DatabaseStorage()
    ids = {storage.append(make_record()) for _ in range(3)}
    assert len(ids) == 3
    assert ContactSubmission.objects.count() == 3


def test_database_errors_become_storage_errors(monkeypatch):
    def broken_create(**kwargs):
        raise DatabaseError("connection refused")

    monkeypatch.setattr(ContactSubmission.objects, "create", broken_create)

    with pytest.raises(StorageError):
        DatabaseStorage().append(make_record())


@pytest.mark.django_db
def test_database_storage_accepts_long_names_and_emails():
    name = "Ana " * 150
    email = "ana" * 100 + "@x.com"

    stored_id = DatabaseStorage().append(make_record(name=name, email=email))

    submission = ContactSubmission.objects.get(pk=stored_id)
    assert (submission.name, submission.email) == (name, email)
    assert isinstance(ContactSubmission._meta.get_field("name"), models.TextField)
    assert isinstance(ContactSubmission._meta.get_field("email"), models.TextField)
