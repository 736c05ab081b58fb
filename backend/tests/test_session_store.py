import pytest

from neuropath.sessions.store import SessionHistoryStore


def test_append_assigns_session_id(make_metrics):
    store = SessionHistoryStore()
    stored = store.append("owner-1", make_metrics())

    assert stored.session_id
    assert store.get_history("owner-1")[0].session_id == stored.session_id


def test_existing_session_id_is_kept(make_metrics):
    store = SessionHistoryStore()
    stored = store.append("owner-1", make_metrics(session_id="abc"))
    assert stored.session_id == "abc"


def test_history_is_chronological_and_limited(make_metrics):
    store = SessionHistoryStore()
    store.append("owner-1", make_metrics(days_ago=1, correct_matches=11))
    store.append("owner-1", make_metrics(days_ago=3, correct_matches=13))
    store.append("owner-1", make_metrics(days_ago=2, correct_matches=12))

    history = store.get_history("owner-1")
    assert [item.correct_matches for item in history] == [13, 12, 11]
    assert [item.correct_matches for item in store.get_history("owner-1", limit=2)] == [12, 11]


def test_owners_are_isolated(make_metrics):
    store = SessionHistoryStore()
    store.append("owner-1", make_metrics())
    store.append("owner-2", make_metrics())
    store.append("owner-2", make_metrics())

    assert len(store.get_history("owner-1")) == 1
    assert len(store.get_history("owner-2")) == 2
    assert store.get_history("") == []
    assert store.list_owner_ids() == ["owner-1", "owner-2"]


def test_blank_owner_is_rejected(make_metrics):
    with pytest.raises(ValueError):
        SessionHistoryStore().append("  ", make_metrics())


def test_history_survives_reload(tmp_path, make_metrics):
    path = tmp_path / "data" / "sessions.json"
    original = make_metrics(reaction_time_ms=850.0, optimal_moves=12)

    SessionHistoryStore(path).append("owner-1", original)
    reloaded = SessionHistoryStore(path).get_history("owner-1")

    assert len(reloaded) == 1
    assert reloaded[0].timestamp == original.timestamp
    assert reloaded[0].reaction_time_ms == 850.0
    assert reloaded[0].optimal_moves == 12
    assert not (tmp_path / "data" / "sessions.tmp").exists()


def test_corrupt_file_starts_empty(tmp_path, make_metrics):
    path = tmp_path / "sessions.json"
    path.write_text("{not json", encoding="utf-8")

    store = SessionHistoryStore(path)
    assert store.get_history("owner-1") == []

    store.append("owner-1", make_metrics())
    assert len(SessionHistoryStore(path).get_history("owner-1")) == 1


def test_clear_removes_owner_history(tmp_path, make_metrics):
    path = tmp_path / "sessions.json"
    store = SessionHistoryStore(path)
    store.append("owner-1", make_metrics())
    store.append("owner-1", make_metrics())

    assert store.clear("owner-1") == 2
    assert store.clear("owner-1") == 0
    assert SessionHistoryStore(path).get_history("owner-1") == []


def test_failed_write_leaves_memory_and_disk_unchanged(tmp_path, make_metrics, monkeypatch):
    path = tmp_path / "sessions.json"
    store = SessionHistoryStore(path)
    store.append("owner-1", make_metrics())

    def _disk_full(self, *args, **kwargs):
        raise OSError("No space left on device")

    with monkeypatch.context() as patched:
        patched.setattr(type(path), "write_text", _disk_full)
        with pytest.raises(OSError):
            store.append("owner-1", make_metrics())
        with pytest.raises(OSError):
            store.clear("owner-1")

    assert len(store.get_history("owner-1")) == 1
    assert len(SessionHistoryStore(path).get_history("owner-1")) == 1
