from pathlib import Path

import pytest
from PIL import Image

from comp2sprite.core import frame_loader
from comp2sprite.core.errors import DimensionMismatchError, InputError


def test_frame_sort_key_uses_last_digit_run():
    assert frame_loader.frame_sort_key("comp2_frame_0012.png") == 12
    assert frame_loader.frame_sort_key("shot10[00003].png") == 3
    assert frame_loader.frame_sort_key("cover.png") == 0


def test_order_frame_files_is_numeric_and_stable():
    paths = [Path(n) for n in ["f_10.png", "f_2.png", "b_1.png", "a_1.png", "f_0.png"]]
    ordered = [p.name for p in frame_loader.order_frame_files(paths)]
    assert ordered == ["f_0.png", "b_1.png", "a_1.png", "f_2.png", "f_10.png"]


def test_list_frame_files_filters_and_orders(tmp_path, write_frames):
    write_frames(3, pattern="render_{}.png")
    (tmp_path / "frames" / "notes.txt").write_text("ignore me")
    (tmp_path / "frames" / "render_11.PNG").write_bytes((tmp_path / "frames" / "render_0.png").read_bytes())

    names = [p.name for p in frame_loader.list_frame_files(tmp_path / "frames")]
    assert names == ["render_0.png", "render_1.png", "render_2.png", "render_11.PNG"]


def test_list_frame_files_reports_what_was_found(tmp_path):
    folder = tmp_path / "empty"
    folder.mkdir()
    (folder / "readme.txt").write_text("x")
    with pytest.raises(InputError, match="readme.txt"):
        frame_loader.list_frame_files(folder)


def test_list_frame_files_missing_folder(tmp_path):
    with pytest.raises(InputError, match="does not exist"):
        frame_loader.list_frame_files(tmp_path / "nope")


@pytest.mark.parametrize(
    "name, expected",
    [("a.png", "PNG"), ("a.TIF", "TIFF"), ("a.jpeg", "JPEG"), ("a.exr", "EXR"), ("noext", "unknown")],
)
def test_detect_image_format(name, expected):
    assert frame_loader.detect_image_format([Path(name)]) == expected


def test_detect_image_format_empty():
    assert frame_loader.detect_image_format([]) == "unknown"


def test_load_frame_converts_to_rgba(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (4, 3), (10, 20, 30)).save(path)
    frame = frame_loader.load_frame(path)
    assert frame.mode == "RGBA"
    assert frame.getpixel((0, 0)) == (10, 20, 30, 255)


def test_load_frame_unreadable(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(InputError, match="broken.png") as excinfo:
        frame_loader.load_frame(path)
    assert excinfo.value.path == path


def test_load_frame_missing(tmp_path):
    with pytest.raises(InputError, match="not found"):
        frame_loader.load_frame(tmp_path / "gone.png")


@pytest.mark.parametrize("workers", [1, 4])
def test_load_frames_keeps_index_order(write_frames, workers):
    paths = write_frames(9)
    frames = frame_loader.load_frames(paths, workers=workers)
    reference = [frame_loader.load_frame(p).getpixel((0, 0)) for p in paths]
    assert [f.getpixel((0, 0)) for f in frames] == reference


def test_load_frames_rejects_mismatched_sizes(tmp_path, write_frames):
    paths = write_frames(3, size=(8, 6))
    odd = tmp_path / "frames" / "frame_0003.png"
    Image.new("RGBA", (8, 7)).save(odd)
    with pytest.raises(DimensionMismatchError) as excinfo:
        frame_loader.load_frames(paths + [odd])
    err = excinfo.value
    assert err.index == 3
    assert err.expected == (8, 6)
    assert err.actual == (8, 7)
    assert str(err) == "frame dimension mismatch at index 3, expected 8x6 got 8x7"


def test_load_frames_empty():
    with pytest.raises(InputError, match="no frames to pack"):
        frame_loader.load_frames([])


def _track_closes(monkeypatch):
    decoded, closed = [], []
    real_load = frame_loader.load_frame

    def tracking_load(path):
        image = real_load(path)
        real_close = image.close

        def close():
            closed.append(image)
            real_close()

        image.close = close
        decoded.append(image)
        return image

    monkeypatch.setattr(frame_loader, "load_frame", tracking_load)
    return decoded, closed


def test_load_frames_threaded_closes_decoded_frames_on_failure(monkeypatch, write_frames):
    paths = write_frames(6)
    paths[0].write_bytes(b"corrupt")
    decoded, closed = _track_closes(monkeypatch)

    with pytest.raises(InputError, match="frame_0000.png"):
        frame_loader.load_frames(paths, workers=3)

    assert {id(image) for image in decoded} <= {id(image) for image in closed}


def test_load_frames_threaded_closes_all_frames_on_mismatch(monkeypatch, tmp_path, write_frames):
    paths = write_frames(4, size=(8, 6))
    Image.new("RGBA", (6, 8)).save(paths[2])
    decoded, closed = _track_closes(monkeypatch)

    with pytest.raises(DimensionMismatchError):
        frame_loader.load_frames(paths, workers=2)

    assert len(decoded) == 4
    assert {id(image) for image in decoded} == {id(image) for image in closed}
