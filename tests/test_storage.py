import json
import os
from datetime import datetime, timedelta

from mod_dredger.storage import StorageManager

PAGE = "https://wewantmods.com/sims4/hair/ponytail-cc/"


def test_visited_pages_go_stale(tmp_path):
    storage = StorageManager(data_dir=str(tmp_path), freshness_days=90)
    now = datetime(2024, 6, 1)
    storage.mark_visited(PAGE, now=now)

    assert storage.is_fresh(PAGE, now=now + timedelta(days=89))
    assert not storage.is_fresh(PAGE, now=now + timedelta(days=90))
    assert not storage.is_fresh("https://wewantmods.com/sims4/other/")


def test_state_survives_reload(tmp_path):
    storage = StorageManager(data_dir=str(tmp_path))
    storage.mark_visited(PAGE)
    storage.add_unmapped({"sims4-cas-stuff", "weird"})
    storage.record_run({"created": 1}, datetime(2024, 6, 1, 12, 0), "completed")
    storage.flush_all()

    reloaded = StorageManager(data_dir=str(tmp_path))
    assert PAGE in reloaded.visited
    assert reloaded.unmapped == {"sims4-cas-stuff", "weird"}
    assert reloaded.history[-1]["created"] == 1
    assert reloaded.history[-1]["status"] == "completed"

    with open(os.path.join(str(tmp_path), "unmapped_categories.json")) as f:
        assert json.load(f) == ["sims4-cas-stuff", "weird"]


def test_auto_flush_at_threshold(tmp_path):
    storage = StorageManager(data_dir=str(tmp_path), flush_threshold=2)
    storage.mark_visited(PAGE)
    assert not os.path.exists(storage.visited_file)
    storage.mark_visited(PAGE + "2/")
    assert os.path.exists(storage.visited_file)
    assert not os.path.exists(storage.visited_file + ".tmp")


def test_history_is_bounded(tmp_path):
    storage = StorageManager(data_dir=str(tmp_path))
    for n in range(105):
        storage.record_run({"created": n}, datetime(2024, 6, 1), "completed")
    assert len(storage.history) == 100
    assert storage.history[0]["created"] == 5


def test_unreadable_files_are_ignored(tmp_path):
    with open(os.path.join(str(tmp_path), "visited_pages.json"), "w") as f:
        f.write("{not json")
    with open(os.path.join(str(tmp_path), "run_history.json"), "w") as f:
        json.dump({"wrong": "shape"}, f)

    storage = StorageManager(data_dir=str(tmp_path))
    assert storage.visited == {}
    assert storage.history == []
