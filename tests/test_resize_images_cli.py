"""
Tests for the batch command-line tool.
"""

from PIL import Image as PILImage

from cli.resize_images import iter_inputs, main
from conftest import RED, WHITE


def test_resizes_single_file(tmp_path, gradient_image, encode_png):
    src = tmp_path / "photo.png"
    src.write_bytes(encode_png(gradient_image(40, 20)))
    out_dir = tmp_path / "out"

    code = main([str(src), "--width", "10", "--output-dir", str(out_dir)])

    assert code == 0
    with PILImage.open(out_dir / "photo_resized.png") as pil:
        assert pil.size == (10, 5)


def test_directory_with_trim_and_jpeg(tmp_path, make_image, encode_png):
    (tmp_path / "a.png").write_bytes(encode_png(make_image(10, 10, WHITE, [((3, 3, 6, 6), RED)])))
    (tmp_path / "notes.txt").write_text("skip me")

    code = main([str(tmp_path), "--trim", "--format", "jpg"])

    assert code == 0
    with PILImage.open(tmp_path / "a_resized.jpg") as pil:
        assert pil.format == "JPEG"
        assert pil.size == (4, 4)


def test_missing_and_corrupt_inputs_fail(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")

    assert main([str(bad), str(tmp_path / "missing.png")]) == 1


def test_iter_inputs_filters_extensions(tmp_path):
    (tmp_path / "x.PNG").write_bytes(b"")
    (tmp_path / "y.gif").write_bytes(b"")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "z.webp").write_bytes(b"")

    flat = [p.name for p in iter_inputs([str(tmp_path)])]
    deep = [p.name for p in iter_inputs([str(tmp_path)], recursive=True)]

    assert flat == ["x.PNG"]
    assert sorted(deep) == ["x.PNG", "z.webp"]


def test_remove_background_writes_transparent_corners(tmp_path, make_image, encode_png):
    src = tmp_path / "logo.png"
    src.write_bytes(encode_png(make_image(8, 8, WHITE, [((3, 3, 4, 4), RED)])))

    assert main([str(src), "--remove-background"]) == 0

    with PILImage.open(tmp_path / "logo_resized.png") as pil:
        assert pil.getpixel((0, 0))[3] == 0
        assert pil.getpixel((3, 3)) == RED


def test_compression_level_changes_output_size(tmp_path, gradient_image, encode_png):
    src = tmp_path / "g.png"
    src.write_bytes(encode_png(gradient_image(100, 100)))

    assert main([str(src), "--compression", "0", "--output-dir", str(tmp_path / "stored")]) == 0
    assert main([str(src), "--compression", "9", "--output-dir", str(tmp_path / "best")]) == 0

    stored = (tmp_path / "stored" / "g_resized.png").stat().st_size
    best = (tmp_path / "best" / "g_resized.png").stat().st_size
    assert best < stored
