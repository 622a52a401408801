import os
import stat

import numpy as np
import pytest

from conftest import canvas

from shapetrace.errors import DecodeError, IoError
from shapetrace.raster import encode_png, image_from_array, load_image, write_bytes_atomic


def test_load_image_is_read_only(blank_png):
    image = load_image(blank_png)
    assert (image.width, image.height, image.channels) == (300, 300, 3)
    assert image.path == blank_png
    with pytest.raises(ValueError):
        image.pixels[0, 0, 0] = 1


def test_load_missing_file(tmp_path):
    with pytest.raises(IoError):
        load_image(tmp_path / "missing.png")


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_load_corrupt_file(tmp_path, payload):
    path = tmp_path / "broken.png"
    path.write_bytes(payload)
    with pytest.raises(DecodeError):
        load_image(path)


def test_image_from_array_takes_a_copy():
    pixels = canvas(10, 10)
    image = image_from_array(pixels)
    pixels[0, 0] = 9
    assert image.pixels[0, 0, 0] == 0


def test_write_bytes_atomic_replaces_target(tmp_path):
    target = tmp_path / "out.png"
    target.write_bytes(b"old")
    data = encode_png(image_from_array(canvas(8, 8)))
    assert write_bytes_atomic(target, data) == target
    assert target.read_bytes() == data
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]


def test_write_bytes_atomic_missing_directory(tmp_path):
    with pytest.raises(IoError):
        write_bytes_atomic(tmp_path / "nope" / "out.png", b"data")
    assert not (tmp_path / "nope").exists()


def test_encode_png_roundtrip_pixels():
    import cv2

    pixels = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
    data = encode_png(image_from_array(pixels))
    decoded = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_UNCHANGED)
    assert np.array_equal(decoded, pixels)


def test_write_bytes_atomic_follows_umask(tmp_path):
    previous = os.umask(0o022)
    try:
        target = write_bytes_atomic(tmp_path / "overlay.png", b"data")
    finally:
        os.umask(previous)
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_write_bytes_atomic_keeps_existing_mode(tmp_path):
    target = tmp_path / "overlay.png"
    target.write_bytes(b"old")
    target.chmod(0o640)
    write_bytes_atomic(target, b"new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o640
