import json
import os
import stat

import pytest

from errors import FormatError, StorageError
from models import Task
from storage import Storage
from tracker import Tracker


SAMPLE = [
    {"id": 5381, "title": "Buy milk", "CreatedAt": "2024-03-01T09:15:00.123456789+01:00", "status": False},
    {"id": 5382, "title": "Café ☕", "CreatedAt": "2024-03-02T10:00:00Z", "status": True},
]


def test_load_reads_wire_keys(write_store):
    path = write_store(SAMPLE)
    tasks = Storage.load_tasks(path)
    assert tasks == [
        Task(id=5381, title="Buy milk", created_at="2024-03-01T09:15:00.123456789+01:00", completed=False),
        Task(id=5382, title="Café ☕", created_at="2024-03-02T10:00:00Z", completed=True),
    ]


def test_load_null_document_is_empty(tmp_path):
    path = tmp_path / 'tasks.json'
    path.write_text('null', encoding='utf-8')
    assert Storage.load_tasks(path) == []


def test_load_missing_file_raises_storage_error(tmp_path):
    with pytest.raises(StorageError, match="error opening file"):
        Storage.load_tasks(tmp_path / 'nope.json')


def test_load_invalid_json_raises_format_error(tmp_path):
    path = tmp_path / 'tasks.json'
    path.write_text('[{"id": 1,', encoding='utf-8')
    with pytest.raises(FormatError, match="deserializing JSON"):
        Storage.load_tasks(path)


@pytest.mark.parametrize('document', [
    {"id": 1},
    "tasks",
    [1, 2],
    [{"id": "5381", "title": "x", "CreatedAt": "2024-01-01T00:00:00Z", "status": False}],
    [{"id": True, "title": "x", "CreatedAt": "2024-01-01T00:00:00Z", "status": False}],
    [{"id": 5381, "CreatedAt": "2024-01-01T00:00:00Z", "status": False}],
    [{"id": 5381, "title": "x", "CreatedAt": "2024-01-01T00:00:00Z", "status": 1}],
    [{"id": 5381, "title": "x", "CreatedAt": "2024-01-01T00:00:00Z", "status": "done"}],
])
def test_load_wrong_shape_raises_format_error(write_store, document):
    path = write_store(document)
    with pytest.raises(FormatError):
        Storage.load_tasks(path)


def test_format_error_names_entry_index(write_store):
    bad = SAMPLE + [{"id": 5383, "title": None, "CreatedAt": "2024-03-03T08:00:00Z", "status": False}]
    path = write_store(bad)
    with pytest.raises(FormatError, match="entry 2"):
        Storage.load_tasks(path)


def test_save_writes_wire_keys_with_two_space_indent(tmp_path):
    path = tmp_path / 'tasks.json'
    Storage.save_tasks(path, [Task(id=5381, title="Buy milk", created_at="2024-03-01T09:15:00+01:00")])
    text = path.read_text(encoding='utf-8')
    assert json.loads(text) == [
        {"id": 5381, "title": "Buy milk", "CreatedAt": "2024-03-01T09:15:00+01:00", "status": False}
    ]
    assert '\n  {\n    "id": 5381,' in text


def test_save_keeps_non_ascii_literal(tmp_path):
    path = tmp_path / 'tasks.json'
    Storage.save_tasks(path, [Task(id=1, title="Café ☕", created_at="2024-01-01T00:00:00Z")])
    assert "Café ☕" in path.read_text(encoding='utf-8')


def test_round_trip_preserves_content(write_store):
    path = write_store(SAMPLE)
    before = json.loads(path.read_text(encoding='utf-8'))
    Storage.save_tasks(path, Storage.load_tasks(path))
    assert json.loads(path.read_text(encoding='utf-8')) == before


def test_save_creates_parent_directories(tmp_path):
    path = tmp_path / 'nested' / 'dir' / 'tasks.json'
    Storage.save_tasks(path, [])
    assert json.loads(path.read_text(encoding='utf-8')) == []


def test_save_leaves_no_temp_files(store):
    Storage.save_tasks(store, [Task(id=5381, title="a", created_at="2024-01-01T00:00:00Z")])
    assert sorted(p.name for p in store.parent.iterdir()) == ['tasks.json']


def test_failed_replace_keeps_original_and_cleans_up(store, monkeypatch):
    original = store.read_text(encoding='utf-8')

    def boom(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr('storage.os.replace', boom)
    with pytest.raises(StorageError, match="error writing to file"):
        Storage.save_tasks(store, [Task(id=5381, title="a", created_at="2024-01-01T00:00:00Z")])
    assert store.read_text(encoding='utf-8') == original
    assert sorted(p.name for p in store.parent.iterdir()) == ['tasks.json']


def test_save_into_unwritable_location_raises_storage_error(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory', encoding='utf-8')
    with pytest.raises(StorageError, match="error creating file"):
        Storage.save_tasks(blocker / 'tasks.json', [])


def test_init_store_creates_empty_file(tmp_path):
    path = tmp_path / 'tasks.json'
    assert Storage.init_store(path) is True
    assert Storage.load_tasks(path) == []


def test_init_store_does_not_clobber_without_force(write_store):
    path = write_store(SAMPLE)
    assert Storage.init_store(path) is False
    assert len(Storage.load_tasks(path)) == 2
    assert Storage.init_store(path, force=True) is True
    assert Storage.load_tasks(path) == []


@pytest.mark.parametrize('created_at', [
    "not a time",
    "",
    "2024-01-01",
    "2024-01-01T00:00:00",
    "2024-13-01T00:00:00Z",
    "2024-02-30T00:00:00Z",
    "2024-01-01T24:00:00Z",
    "2024-01-01T00:00:00+25:00",
    "2024-01-01 00:00:00Z",
])
def test_load_rejects_bad_timestamps(write_store, created_at):
    path = write_store([{"id": 5381, "title": "a", "CreatedAt": created_at, "status": False}])
    with pytest.raises(FormatError, match="CreatedAt"):
        Storage.load_tasks(path)


@pytest.mark.parametrize('created_at', [
    "2024-03-01T09:15:00Z",
    "2024-03-01T09:15:00.123456789+01:00",
    "2024-03-01T09:15:00-05:30",
])
def test_load_accepts_rfc3339_timestamps_verbatim(write_store, created_at):
    path = write_store([{"id": 5381, "title": "a", "CreatedAt": created_at, "status": False}])
    assert Storage.load_tasks(path)[0].created_at == created_at


def test_load_matches_keys_ignoring_case(write_store):
    path = write_store([{"ID": 5381, "Title": "a", "createdAt": "2024-01-01T00:00:00Z", "STATUS": True}])
    assert Storage.load_tasks(path) == [
        Task(id=5381, title="a", created_at="2024-01-01T00:00:00Z", completed=True)
    ]


def test_load_prefers_exact_key(write_store):
    path = write_store([{"status": False, "Status": True, "id": 1, "title": "a",
                         "CreatedAt": "2024-01-01T00:00:00Z"}])
    assert Storage.load_tasks(path)[0].completed is False


def test_load_missing_status_means_not_completed(write_store):
    path = write_store([{"id": 5381, "title": "a", "CreatedAt": "2024-01-01T00:00:00Z"}])
    assert Storage.load_tasks(path)[0].completed is False


def test_load_deeply_nested_json_raises_format_error(tmp_path):
    path = tmp_path / 'tasks.json'
    path.write_text('[' * 100000 + ']' * 100000, encoding='utf-8')
    with pytest.raises(FormatError):
        Storage.load_tasks(path)


def test_save_keeps_existing_file_mode(store):
    os.chmod(store, 0o644)
    Tracker(store).add_task('Buy milk')
    assert stat.S_IMODE(os.stat(store).st_mode) == 0o644
    os.chmod(store, 0o640)
    Tracker(store).complete_task(5381)
    assert stat.S_IMODE(os.stat(store).st_mode) == 0o640


def test_save_new_file_follows_umask(tmp_path):
    old = os.umask(0o022)
    try:
        path = tmp_path / 'tasks.json'
        Storage.save_tasks(path, [])
    finally:
        os.umask(old)
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644


def test_load_null_status_means_not_completed(write_store):
    path = write_store([{"id": 5381, "title": "a", "CreatedAt": "2024-01-01T00:00:00Z", "status": None}])
    assert Storage.load_tasks(path)[0].completed is False
