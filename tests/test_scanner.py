"""输入路径解析与图片扫描。"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from imgwork.core.scanner import discover_images, is_image_file, resolve_inputs


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_directory_scan_counts_only_images(tmp_path: Path) -> None:
    root = tmp_path / "photos"
    expected = {
        _touch(root / "a.jpg"),
        _touch(root / "b.JPEG"),
        _touch(root / "sub" / "c.PNG"),
        _touch(root / "sub" / "deep" / "d.webp"),
        _touch(root / "sub" / "deep" / "deeper" / "e.tif"),
        _touch(root / "anim.gif"),
    }
    _touch(root / "notes.txt")
    _touch(root / "sub" / "readme.md")
    _touch(root / "sub" / "deep" / "archive.zip")
    (root / "empty").mkdir()

    found = discover_images(resolve_inputs([root]))

    assert len(found) == 6
    assert set(found) == {p.resolve() for p in expected}
    assert all(p.is_absolute() for p in found)


def test_directory_scan_is_depth_first(tmp_path: Path) -> None:
    root = tmp_path / "photos"
    _touch(root / "sub" / "a.jpg")
    _touch(root / "sub" / "inner" / "b.jpg")
    _touch(root / "sub" / "c.jpg")
    _touch(root / "top.jpg")

    found = discover_images(resolve_inputs([root]))

    names = [p.name for p in found]
    sub_files = [n for n in names if n != "top.jpg"]
    # 子目录 sub 的内容连续出现，不会被 top.jpg 打断
    start = names.index(sub_files[0])
    assert names[start : start + 3] == sub_files


def test_results_follow_input_order(tmp_path: Path) -> None:
    first = _touch(tmp_path / "z.png")
    second_dir = tmp_path / "dir"
    inner = _touch(second_dir / "a.png")
    third = _touch(tmp_path / "m.jpg")

    found = discover_images(resolve_inputs([first, second_dir, third]))

    assert found == [first.resolve(), inner.resolve(), third.resolve()]


def test_missing_path_is_skipped_with_warning(tmp_path: Path, caplog) -> None:
    image = _touch(tmp_path / "ok.jpg")

    with caplog.at_level(logging.WARNING):
        found = discover_images(resolve_inputs([tmp_path / "missing", image]))

    assert found == [image.resolve()]
    assert "missing" in caplog.text


def test_non_image_file_input_is_skipped(tmp_path: Path, caplog) -> None:
    text_file = _touch(tmp_path / "notes.txt")

    with caplog.at_level(logging.WARNING):
        found = discover_images(resolve_inputs([text_file]))

    assert found == []
    assert "notes.txt" in caplog.text


def test_symlinked_directories_are_not_followed(tmp_path: Path) -> None:
    root = tmp_path / "photos"
    _touch(root / "a.jpg")
    os.symlink(root, root / "loop", target_is_directory=True)

    found = discover_images(resolve_inputs([root]))

    assert [p.name for p in found] == ["a.jpg"]


def test_resolve_inputs_uses_explicit_cwd(tmp_path: Path) -> None:
    folder = tmp_path / "work" / "images"
    folder.mkdir(parents=True)
    _touch(tmp_path / "work" / "single.png")

    specs = resolve_inputs(["images", "single.png", "absent.jpg"], cwd=tmp_path / "work")

    assert specs[0].path == folder.resolve()
    assert specs[0].is_dir
    assert not specs[1].is_dir and specs[1].exists
    assert not specs[2].exists


def test_is_image_file_is_case_insensitive() -> None:
    assert is_image_file(Path("x.JPG"))
    assert is_image_file(Path("x.TiFF"))
    assert not is_image_file(Path("x.bmp"))
    assert not is_image_file(Path("jpg"))


def test_unreadable_directory_is_logged_and_skipped(tmp_path: Path, monkeypatch, caplog) -> None:
    root = tmp_path / "photos"
    kept = _touch(root / "a.jpg")
    _touch(root / "locked" / "b.jpg")
    real_scandir = os.scandir

    def guarded_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", guarded_scandir)

    with caplog.at_level(logging.ERROR):
        found = discover_images(resolve_inputs([root]))

    assert found == [kept]
    assert "locked" in caplog.text


def test_symlinked_inputs_keep_the_given_path(tmp_path: Path) -> None:
    storage = tmp_path / "storage" / "photos"
    real_file = _touch(storage / "a.jpg")
    work = tmp_path / "work"
    work.mkdir()
    os.symlink(storage, work / "images", target_is_directory=True)
    os.symlink(real_file, work / "cover.jpg")

    specs = resolve_inputs(["images", "cover.jpg"], cwd=work)

    assert specs[0].path == work / "images"
    assert specs[0].is_dir
    assert specs[1].path == work / "cover.jpg"
    assert not specs[1].is_dir and specs[1].exists
    assert discover_images(specs) == [work / "images" / "a.jpg", work / "cover.jpg"]
