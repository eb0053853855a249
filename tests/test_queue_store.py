from concurrent.futures import ThreadPoolExecutor

import pytest

from song_queue_service.errors import EmptyQueue, InvalidInput, QueueFull
from song_queue_service.queue_store import SongQueueStore, validate_url


def test_pop_returns_songs_in_submission_order(store):
    urls = [f"http://songs.example/{i}.mp3" for i in range(10)]
    for url in urls:
        store.enqueue(url)

    popped = [store.pop_oldest().url for _ in urls]

    assert popped == urls
    assert len(store) == 0


def test_empty_queue_peek_and_pop_raise(store):
    with pytest.raises(EmptyQueue):
        store.peek_oldest()
    with pytest.raises(EmptyQueue):
        store.pop_oldest()


def test_peek_does_not_remove(store):
    store.enqueue("http://a.mp3")
    store.enqueue("http://b.mp3")

    assert store.peek_oldest().url == "http://a.mp3"
    assert store.peek_oldest().url == "http://a.mp3"
    assert len(store) == 2


def test_entries_get_sequential_ids_and_sequence_numbers(store):
    first = store.enqueue("http://a.mp3")
    second = store.enqueue("http://b.mp3")

    assert (first.id, first.submitted_at) == ("1", 1)
    assert (second.id, second.submitted_at) == ("2", 2)


def test_list_all_is_a_stable_snapshot(store):
    assert store.list_all() == []

    store.enqueue("http://a.mp3")
    store.enqueue("http://b.mp3")
    first = store.list_all()
    second = store.list_all()

    assert first == second
    assert [entry.url for entry in first] == ["http://a.mp3", "http://b.mp3"]

    first.clear()
    assert len(store) == 2


@pytest.mark.parametrize(
    "url",
    ["", "   ", "not a url", "ftp://files.example/a.mp3", "http://", "a.mp3", None, 42],
)
def test_invalid_url_leaves_queue_unchanged(store, url):
    store.enqueue("http://a.mp3")

    with pytest.raises(InvalidInput):
        store.enqueue(url)

    assert [entry.url for entry in store.list_all()] == ["http://a.mp3"]
    assert store.get_stats().rejected_submissions == 1
    # The failed call did not consume a sequence number
    assert store.enqueue("http://b.mp3").submitted_at == 2


def test_validate_url_strips_whitespace():
    assert validate_url("  https://youtu.be/abc  ") == "https://youtu.be/abc"


def test_remove_by_id(store):
    a = store.enqueue("http://a.mp3")
    b = store.enqueue("http://b.mp3")

    assert store.remove(a.id) is True
    assert [entry.id for entry in store.list_all()] == [b.id]
    assert store.remove(a.id) is False
    assert a.id not in [entry.id for entry in store.list_all()]


def test_remove_unknown_id_does_not_alter_queue(store):
    store.enqueue("http://a.mp3")
    before = store.list_all()

    assert store.remove("999") is False
    assert store.list_all() == before


def test_ids_are_not_reused_after_removal(store):
    a = store.enqueue("http://a.mp3")
    store.remove(a.id)

    b = store.enqueue("http://a.mp3")

    assert b.id != a.id
    assert b.submitted_at > a.submitted_at


def test_remove_by_url_takes_oldest_match(store):
    first = store.enqueue("http://a.mp3")
    store.enqueue("http://b.mp3")
    second = store.enqueue("http://a.mp3")

    assert store.remove_by_url("http://a.mp3") is True
    assert [entry.id for entry in store.list_all()] == ["2", second.id]
    assert first.id not in [entry.id for entry in store.list_all()]
    assert store.remove_by_url("http://missing.mp3") is False


def test_queue_full_rejects_without_changing_queue():
    store = SongQueueStore(max_queue_size=2)
    store.enqueue("http://a.mp3")
    store.enqueue("http://b.mp3")

    with pytest.raises(QueueFull):
        store.enqueue("http://c.mp3")

    assert len(store) == 2
    store.pop_oldest()
    assert store.enqueue("http://c.mp3").submitted_at == 3


def test_stats_and_history(store):
    store.enqueue("http://a.mp3", title="Song A", user="alice")
    b = store.enqueue("http://b.mp3")
    store.enqueue("http://c.mp3")
    store.pop_oldest()
    store.remove(b.id)

    stats = store.get_stats()
    assert stats.total_submitted == 3
    assert stats.total_popped == 1
    assert stats.total_removed == 1
    assert stats.current_queue_size == 1

    history = store.get_played_history()
    assert len(history) == 1
    assert history[0]["url"] == "http://a.mp3"
    assert history[0]["title"] == "Song A"
    assert history[0]["user"] == "alice"
    assert history[0]["waitSeconds"] >= 0


def test_history_is_bounded_and_newest_first():
    store = SongQueueStore(history_size=2)
    for name in "abc":
        store.enqueue(f"http://{name}.mp3")
        store.pop_oldest()

    assert [song["url"] for song in store.get_played_history()] == ["http://c.mp3", "http://b.mp3"]


def test_concurrent_enqueues_keep_every_entry(store):
    urls = [f"http://songs.example/{i}.mp3" for i in range(200)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        created = list(pool.map(store.enqueue, urls))

    entries = store.list_all()
    assert len(entries) == len(urls)
    assert len({entry.id for entry in entries}) == len(urls)
    assert {entry.url for entry in entries} == set(urls)
    assert {entry.id for entry in created} == {entry.id for entry in entries}

    sequence = [entry.submitted_at for entry in entries]
    assert sequence == sorted(sequence)
    assert sequence == list(range(1, len(urls) + 1))


def test_concurrent_enqueue_and_pop_conserve_entries(store):
    for i in range(100):
        store.enqueue(f"http://seed.example/{i}.mp3")

    def pop():
        try:
            return store.pop_oldest()
        except EmptyQueue:
            return None

    with ThreadPoolExecutor(max_workers=16) as pool:
        added = [pool.submit(store.enqueue, f"http://new.example/{i}.mp3") for i in range(100)]
        popped = [pool.submit(pop) for _ in range(150)]
        added = [future.result() for future in added]
        popped = [future.result() for future in popped if future.result() is not None]

    remaining = store.list_all()
    assert len(popped) + len(remaining) == 200
    assert not {e.id for e in popped} & {e.id for e in remaining}

    # Every pop took the oldest entry at that moment
    if popped and remaining:
        assert max(e.submitted_at for e in popped) < min(e.submitted_at for e in remaining)
    assert [e.submitted_at for e in remaining] == sorted(e.submitted_at for e in remaining)
