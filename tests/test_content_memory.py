import threading

from pagegen.services.content_memory import ContentMemory


def test_tracks_headlines_and_feature_titles():
    memory = ContentMemory()
    memory.track("s1", "Grow Your Craft Brand", ["Performance Analytics", "Gap Finder"])
    snapshot = memory.snapshot("s1")
    assert snapshot.headlines == ("Grow Your Craft Brand",)
    assert snapshot.feature_titles == ("Performance Analytics", "Gap Finder")
    assert memory.snapshot("other").is_empty


def test_recent_items_are_bounded_and_deduplicated():
    memory = ContentMemory(max_headlines=2, max_feature_titles=3)
    memory.track("s1", "First", ["A", "B"])
    memory.track("s1", "Second", ["C", "a"])
    memory.track("s1", "Third", [])
    snapshot = memory.snapshot("s1")
    assert snapshot.headlines == ("Second", "Third")
    assert snapshot.feature_titles == ("B", "C", "a")


def test_blank_values_and_missing_session_are_ignored():
    memory = ContentMemory()
    memory.track(None, "Headline", ["Title"])
    memory.track("s1", "  ", ["", "  "])
    assert memory.snapshot("s1").is_empty
    assert memory.warning_for(None) == ""
    assert memory.warning_for("s1") == ""


def test_warning_lists_previous_content():
    memory = ContentMemory()
    memory.track("s1", "Grow Your Craft Brand", ["Performance Analytics"])
    warning = memory.warning_for("s1")
    assert warning.startswith("PREVIOUSLY USED CONTENT - DO NOT REPEAT:")
    assert '"Grow Your Craft Brand"' in warning
    assert '"Performance Analytics"' in warning


def test_snapshots_are_not_affected_by_later_writes():
    memory = ContentMemory()
    memory.track("s1", "First", [])
    before = memory.snapshot("s1")
    memory.track("s1", "Second", [])
    assert before.headlines == ("First",)


def test_clear():
    memory = ContentMemory()
    memory.track("s1", "One", [])
    memory.track("s2", "Two", [])
    memory.clear("s1")
    assert memory.snapshot("s1").is_empty
    assert not memory.snapshot("s2").is_empty
    memory.clear()
    assert memory.snapshot("s2").is_empty


def test_concurrent_tracking_keeps_every_write():
    memory = ContentMemory(max_headlines=100, max_feature_titles=100)

    def worker(offset):
        for idx in range(20):
            memory.track("shared", f"Headline {offset}-{idx}", [])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(memory.snapshot("shared").headlines) == 80


def test_session_count_is_bounded_least_recently_tracked_first():
    memory = ContentMemory(max_sessions=2)
    memory.track("s1", "First session headline", [])
    memory.track("s2", "Second session headline", [])
    memory.track("s1", "First session again", [])
    memory.track("s3", "Third session headline", [])

    assert memory.snapshot("s2").is_empty
    assert memory.snapshot("s1").headlines == ("First session headline", "First session again")
    assert memory.snapshot("s3").headlines == ("Third session headline",)
    assert set(memory._snapshots) == {"s1", "s3"}
    assert set(memory._locks) == {"s1", "s3"}


def test_many_distinct_sessions_do_not_grow_the_store():
    memory = ContentMemory(max_sessions=50)
    for idx in range(5000):
        memory.track(f"session-{idx}", f"Headline {idx}", [f"Feature {idx}"])

    assert len(memory._snapshots) == 50
    assert len(memory._locks) == 50
    assert memory.snapshot("session-4999").headlines == ("Headline 4999",)
    assert memory.snapshot("session-0").is_empty


def test_clear_drops_the_session_lock():
    memory = ContentMemory()
    memory.track("s1", "One", [])
    memory.clear("s1")
    assert "s1" not in memory._locks
