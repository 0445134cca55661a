import io

import numpy as np
import pytest
from PIL import Image
from fastapi.testclient import TestClient

from etchsketch.main import app
from etchsketch.drawing.api import get_store
from etchsketch.drawing.storage.drawings import DrawingStore
from etchsketch.utils import image_to_data_url


def solid_image(width=100, height=100, value=128):
    return Image.fromarray(np.full((height, width, 3), value, dtype=np.uint8), "RGB")


def diagonal_line_image(start=35, end=60, size=100):
    """White square with a 1px black diagonal from (start, start) to (end, end)."""
    arr = np.full((size, size, 3), 255, dtype=np.uint8)
    for k in range(start, end + 1):
        arr[k, k] = 0
    return Image.fromarray(arr, "RGB")


def png_bytes(image):
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def png_data_url(image):
    return image_to_data_url(png_bytes(image), "image/png")


@pytest.fixture
def store(tmp_path):
    return DrawingStore(str(tmp_path / "drawings"))


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
