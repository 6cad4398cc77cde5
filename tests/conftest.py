from pathlib import Path

import pytest
from PIL import Image

from comp2sprite.core import CompositionInfo


def frame_color(index: int) -> tuple[int, int, int, int]:
    return ((index * 37) % 256, (index * 91) % 256, (index * 53) % 256, 255 - (index % 5) * 40)


@pytest.fixture
def write_frames(tmp_path):
    """Write count solid RGBA PNG frames named frame_0000.png ... into a folder."""

    def _write(count: int, size=(8, 6), folder: Path | None = None, pattern="frame_{:04d}.png"):
        folder = folder or tmp_path / "frames"
        folder.mkdir(parents=True, exist_ok=True)
        paths = []
        for index in range(count):
            path = folder / pattern.format(index)
            Image.new("RGBA", size, frame_color(index)).save(path)
            paths.append(path)
        return paths

    return _write


@pytest.fixture
def comp_info():
    return CompositionInfo.from_timing(name="Hero Walk", width=64, height=64, frame_rate=12.0, duration=2.0)
