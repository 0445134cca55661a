import itertools
import os

import pytest

from etchsketch.drawing.ingestion.models import DrawingCreate, StrokePoint
from etchsketch.drawing.storage.drawings import DrawingReadError, DrawingStore, PointLimitExceeded


def drawing(name="sketch", n=3, handle=None):
    return DrawingCreate(
        name=name,
        twitter_handle=handle,
        points=[StrokePoint(x=i, y=i, timestamp=i * 8) for i in range(n)],
        canvas_width=600,
        canvas_height=400,
    )


@pytest.fixture
def ticking_store(tmp_path):
    ticks = itertools.count(1_700_000_000)
    return DrawingStore(str(tmp_path / "drawings"), clock=lambda: float(next(ticks)))


def test_save_and_read_back(store):
    drawing_id = store.save(drawing("cat", n=5, handle="@artist"))
    loaded = store.get(drawing_id)

    assert loaded.id == drawing_id
    assert loaded.name == "cat"
    assert loaded.twitter_handle == "@artist"
    assert [p.x for p in loaded.points] == [0, 1, 2, 3, 4]
    assert loaded.canvas_width == 600
    assert loaded.creation_time > 0


def test_unknown_ids_are_not_found(store):
    assert store.get("0" * 32) is None
    assert store.get("../../etc/passwd") is None
    assert store.get("") is None


def test_rejects_too_many_points(store):
    with pytest.raises(PointLimitExceeded):
        store.save(drawing(n=8001))
    assert store.save(drawing(n=8000))


def test_list_pages_newest_first(ticking_store):
    ids = [ticking_store.save(drawing(f"d{i}")) for i in range(5)]

    seen = []
    cursor = None
    pages = 0
    while True:
        page = ticking_store.list(2, cursor)
        seen.extend(d.id for d in page.page)
        pages += 1
        if page.is_done:
            break
        cursor = page.continue_cursor

    assert seen == list(reversed(ids))
    assert pages == 3


def test_list_is_stable_when_new_drawings_arrive(ticking_store):
    ids = [ticking_store.save(drawing(f"d{i}")) for i in range(3)]
    first = ticking_store.list(2)
    ticking_store.save(drawing("late"))
    second = ticking_store.list(2, first.continue_cursor)

    assert [d.id for d in second.page] == [ids[0]]
    assert second.is_done


def test_empty_store_lists_nothing(store):
    page = store.list(10)
    assert page.page == []
    assert page.is_done
    assert page.continue_cursor == ""


def test_bad_cursor(store):
    with pytest.raises(ValueError):
        store.list(10, "not-a-cursor")


def test_truncated_file_raises_read_error(store):
    drawing_id = store.save(drawing())
    with open(os.path.join(store.root_dir, f"{drawing_id}.json"), "w") as f:
        f.write('{"id": "%s", "na' % drawing_id)

    with pytest.raises(DrawingReadError):
        store.get(drawing_id)
    assert store.list(10).page == []


def test_save_leaves_no_temp_files(store):
    store.save(drawing())
    assert all(name.endswith(".json") for name in os.listdir(store.root_dir))
