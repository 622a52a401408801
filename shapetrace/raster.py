# shapetrace/raster.py

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import cv2  # type: ignore
import numpy as np

from .errors import DecodeError, IoError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Image:
    """
    Decoded pixels (BGR or BGRA order, as OpenCV decodes them) plus the
    optional source path. Loaded pixel buffers are read-only.
    """

    pixels: np.ndarray  # (H, W) or (H, W, C), uint8
    path: Optional[Path] = None

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])


def image_from_array(pixels: np.ndarray, path: Union[str, Path, None] = None) -> Image:
    """Wrap an in-memory array, taking a private read-only copy."""
    owned = np.array(pixels, copy=True)
    owned.flags.writeable = False
    return Image(pixels=owned, path=Path(path) if path is not None else None)


def load_image(path: Union[str, Path], flags: int = cv2.IMREAD_COLOR) -> Image:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise IoError(f"Cannot read image {path}: {exc}") from exc

    buf = np.frombuffer(data, np.uint8)
    try:
        pixels = cv2.imdecode(buf, flags) if buf.size else None
    except cv2.error as exc:
        raise DecodeError(f"Cannot decode image {path}: {exc}") from exc
    if pixels is None:
        raise DecodeError(f"Cannot decode image: {path}")

    pixels.flags.writeable = False
    logger.debug("Loaded %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
    return Image(pixels=pixels, path=path)


def encode_png(image: Image) -> bytes:
    ok, encoded = cv2.imencode(".png", image.pixels)
    if not ok:
        raise IoError("PNG encoding failed")
    return encoded.tobytes()


def _target_mode(path: Path) -> int:
    """Mode of an existing target, else what a plain open() would create."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_bytes_atomic(path: Union[str, Path], data: bytes) -> Path:
    """
    Write `data` to a temporary file beside `path`, then rename it into
    place. Readers never observe a partially written file.
    """
    path = Path(path)
    directory = path.parent if str(path.parent) else Path(".")
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "wb") as dest:
            dest.write(data)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IoError(f"Cannot write {path}: {exc}") from exc
    return path
