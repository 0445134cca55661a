"""
JSON-file drawing store: one `<id>.json` per drawing under a root directory.

Listing is newest-first with a forward-only cursor. The cursor encodes the
(creation_time, id) of the last drawing returned, so drawings saved while a
client pages through do not shift later pages.
"""
import os
import re
import time
import uuid
import logging
import tempfile
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError

from ..ingestion.models import Drawing, DrawingCreate, DrawingPage
from ..stroke_engine.simplification import MAX_STORED_POINTS

logger = logging.getLogger("drawings")

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class PointLimitExceeded(ValueError):
    pass


class DrawingReadError(Exception):
    """A stored drawing file exists but cannot be parsed."""


def _sort_key(drawing: Drawing) -> Tuple[float, str]:
    return (drawing.creation_time, drawing.id)


def encode_cursor(drawing: Drawing) -> str:
    return f"{drawing.creation_time!r}:{drawing.id}"


def decode_cursor(cursor: str) -> Tuple[float, str]:
    created, sep, drawing_id = cursor.partition(":")
    if not sep or not _ID_RE.match(drawing_id):
        raise ValueError(f"Invalid cursor: {cursor!r}")
    return float(created), drawing_id


class DrawingStore:
    def __init__(self, root_dir: str, clock: Callable[[], float] = time.time):
        self.root_dir = root_dir
        self.clock = clock

    def _path(self, drawing_id: str) -> str:
        return os.path.join(self.root_dir, f"{drawing_id}.json")

    def save(self, drawing: DrawingCreate) -> str:
        if len(drawing.points) > MAX_STORED_POINTS:
            raise PointLimitExceeded(
                f"Drawing has {len(drawing.points)} points, limit is {MAX_STORED_POINTS}"
            )

        os.makedirs(self.root_dir, exist_ok=True)
        record = Drawing(
            id=uuid.uuid4().hex,
            creation_time=self.clock() * 1000,
            **drawing.model_dump(),
        )
        # Write beside the target and swap in, so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(dir=self.root_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(record.model_dump_json(by_alias=True))
            os.replace(tmp_path, self._path(record.id))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.info("Saved drawing %s (%d points)", record.id, len(record.points))
        return record.id

    def get(self, drawing_id: str) -> Optional[Drawing]:
        if not _ID_RE.match(drawing_id or ""):
            return None
        path = self._path(drawing_id)
        if not os.path.exists(path):
            return None
        with open(path, "r") as f:
            try:
                return Drawing.model_validate_json(f.read())
            except ValidationError as e:
                logger.warning("Unreadable drawing file %s: %s", path, e)
                raise DrawingReadError(f"Drawing {drawing_id} is unreadable") from e

    def _all(self) -> List[Drawing]:
        if not os.path.isdir(self.root_dir):
            return []
        drawings = []
        for filename in os.listdir(self.root_dir):
            stem, ext = os.path.splitext(filename)
            if ext != ".json" or not _ID_RE.match(stem):
                continue
            with open(os.path.join(self.root_dir, filename), "r") as f:
                try:
                    drawings.append(Drawing.model_validate_json(f.read()))
                except ValidationError:
                    logger.warning("Skipping unreadable drawing file %s", filename)
        drawings.sort(key=_sort_key, reverse=True)
        return drawings

    def list(self, num_items: int, cursor: Optional[str] = None) -> DrawingPage:
        if num_items <= 0:
            raise ValueError("num_items must be positive")

        drawings = self._all()
        if cursor:
            after = decode_cursor(cursor)
            drawings = [d for d in drawings if _sort_key(d) < after]

        page = drawings[:num_items]
        return DrawingPage(
            page=page,
            is_done=len(drawings) <= num_items,
            continue_cursor=encode_cursor(page[-1]) if page else "",
        )
