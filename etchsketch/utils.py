from PIL import Image, UnidentifiedImageError
import base64
import binascii
import io


class ImageDecodeError(ValueError):
    """The uploaded bytes could not be decoded into a complete image."""


def read_image_from_bytes(data: bytes) -> Image.Image:
    """Decodes the whole image up front so a truncated file fails here, not mid-pipeline."""
    if not data:
        raise ImageDecodeError("Empty image data")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e
    return img


def image_to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(data_url: str) -> Image.Image:
    """
    Accepts `data:<mime>;base64,<payload>` or a bare base64 payload.
    """
    if "base64," in data_url:
        payload = data_url.split("base64,", 1)[1]
    elif data_url.startswith("data:"):
        raise ImageDecodeError("Only base64 data URLs are supported")
    else:
        payload = data_url

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image data: {e}") from e

    return read_image_from_bytes(raw)
