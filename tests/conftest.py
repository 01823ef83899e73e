import json

import pytest


@pytest.fixture
def store(tmp_path):
    """Path to an initialized, empty task file."""
    path = tmp_path / 'tasks.json'
    path.write_text('[]', encoding='utf-8')
    return path


@pytest.fixture
def write_store(tmp_path):
    """Write raw task entries to a task file and return its path."""
    def _write(entries, name='tasks.json'):
        path = tmp_path / name
        path.write_text(json.dumps(entries, indent=2), encoding='utf-8')
        return path
    return _write
