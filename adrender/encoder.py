import io
import logging
import os
import struct
import tempfile
from pathlib import Path
from typing import Union

from PIL import Image
from PIL.PngImagePlugin import PngInfo


logger = logging.getLogger(__name__)

# 1 / 2.2, as stored in the PNG gAMA chunk (scaled by 100000).
PNG_GAMMA = 0.45455


class ImageWriteError(OSError):
    """
    Raised when an encoded image cannot be written to its destination.
    """

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


def encode_png(image: Image.Image) -> bytes:
    """
    Serialise to an 8-bit RGBA PNG carrying an explicit gAMA chunk.
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    info = PngInfo()
    info.add(b"gAMA", struct.pack(">I", int(round(PNG_GAMMA * 100000))))
    buf = io.BytesIO()
    image.save(buf, format="PNG", pnginfo=info, optimize=False)
    return buf.getvalue()


def write_to_path(data: bytes, path: Union[str, Path]) -> Path:
    """
    Write `data` to `path`, creating parent folders. The bytes go to a
    temporary sibling first and are moved into place only once complete.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ImageWriteError("Could not create output directory", path.parent) from exc

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ImageWriteError("Could not write image", path) from exc

    logger.info("wrote %s (%d bytes)", path, len(data))
    return path


def save_png(image: Image.Image, path: Union[str, Path]) -> Path:
    return write_to_path(encode_png(image), path)
