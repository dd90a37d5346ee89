"""
History store tests: load/append/clear, retention bound, non-fatal sink errors.
"""

from cmdtree.db import HistoryStore


def test_missing_file_loads_empty(tmp_path) -> None:
    store = HistoryStore(tmp_path / "history")

    assert store.load() == []
    assert store.last_error is None


def test_append_writes_through_and_reloads_in_order(tmp_path) -> None:
    path = tmp_path / "history"
    store = HistoryStore(path)
    for line in ("ok sync", "nok async", "validation sync"):
        store.append(line)

    assert path.read_text(encoding="utf-8").splitlines() == ["ok sync", "nok async", "validation sync"]
    assert HistoryStore(path).load() == ["ok sync", "nok async", "validation sync"]


def test_retention_bound_drops_oldest_in_memory_and_on_disk(tmp_path) -> None:
    path = tmp_path / "history"
    store = HistoryStore(path, size=3)
    for n in range(5):
        store.append(f"cmd {n}")

    assert store.entries == ["cmd 2", "cmd 3", "cmd 4"]
    assert path.read_text(encoding="utf-8").splitlines() == ["cmd 2", "cmd 3", "cmd 4"]


def test_load_applies_the_bound(tmp_path) -> None:
    path = tmp_path / "history"
    path.write_text("a\nb\n\nc\nd\n", encoding="utf-8")

    assert HistoryStore(path, size=2).load() == ["c", "d"]


def test_clear_truncates_the_sink(tmp_path) -> None:
    path = tmp_path / "history"
    store = HistoryStore(path)
    store.append("ok sync")

    store.clear()

    assert store.entries == []
    assert path.read_text(encoding="utf-8") == ""
    assert HistoryStore(path).load() == []


def test_memory_only_store_never_touches_disk(tmp_path) -> None:
    store = HistoryStore(None)
    store.append("ok sync")

    assert store.load() == ["ok sync"]
    assert list(tmp_path.iterdir()) == []


def test_zero_size_keeps_nothing(tmp_path) -> None:
    store = HistoryStore(tmp_path / "history", size=0)
    store.append("ok sync")

    assert len(store) == 0
    assert not (tmp_path / "history").exists()


def test_embedded_newlines_are_flattened(tmp_path) -> None:
    path = tmp_path / "history"
    store = HistoryStore(path)
    store.append("echo a\nb")

    assert HistoryStore(path).load() == ["echo a b"]


def test_unwritable_sink_is_reported_not_raised(tmp_path) -> None:
    # a directory where the file should be
    store = HistoryStore(tmp_path)

    store.append("ok sync")

    assert store.entries == ["ok sync"]
    assert isinstance(store.last_error, OSError)


def test_unreadable_sink_loads_empty(tmp_path) -> None:
    store = HistoryStore(tmp_path)

    assert store.load() == []
    assert isinstance(store.last_error, OSError)


def test_prompt_history_view_lists_newest_first(tmp_path) -> None:
    store = HistoryStore(tmp_path / "history")
    store.append("first")
    store.append("second")

    view = store.as_prompt_history()

    assert list(view.load_history_strings()) == ["second", "first"]
    view.store_string("ignored")
    assert store.entries == ["first", "second"]


def test_append_after_unterminated_last_line(tmp_path) -> None:
    path = tmp_path / "history"
    path.write_text("old 1\nold 2", encoding="utf-8")
    store = HistoryStore(path)
    store.load()

    store.append("new")

    assert HistoryStore(path).load() == ["old 1", "old 2", "new"]


def test_append_without_load_keeps_existing_lines_apart(tmp_path) -> None:
    path = tmp_path / "history"
    path.write_text("old", encoding="utf-8")

    HistoryStore(path).append("new")

    assert path.read_text(encoding="utf-8") == "old\nnew\n"
