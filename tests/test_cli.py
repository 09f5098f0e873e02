"""命令行行为：退出码、默认输出位置与参数校验。"""

from __future__ import annotations

import csv
from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from imgwork.cli.main import __version__, app

runner = CliRunner()


def _image(path: Path, size=(200, 100), color="blue") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


def test_resize_single_file_defaults_to_sibling_output(tmp_path: Path) -> None:
    source = _image(tmp_path / "banner.png", size=(2400, 1600))

    result = runner.invoke(app, ["resize", str(source), "--w", "1200"])

    assert result.exit_code == 0, result.output
    with Image.open(tmp_path / "banner-imgwork.png") as img:
        assert img.size == (1200, 800)


def test_convert_directory_defaults_to_imgwork_sibling(tmp_path: Path) -> None:
    images = tmp_path / "images"
    _image(images / "a.png")
    _image(images / "nested" / "b.jpg")

    result = runner.invoke(app, ["convert", str(images), "--to", "webp"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "images-imgwork" / "a.webp").exists()
    assert (tmp_path / "images-imgwork" / "nested" / "b.webp").exists()


def test_multiple_inputs_default_to_cwd_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first = _image(tmp_path / "one" / "x.png")
    folder = tmp_path / "two"
    _image(folder / "deep" / "y.png")
    third = _image(tmp_path / "three" / "z.png")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    result = runner.invoke(app, ["crop", str(first), str(folder), str(third), "--w", "50", "--h", "50"])

    assert result.exit_code == 0, result.output
    output = workdir / "imgwork-output"
    assert (output / "x.png").exists()
    assert (output / "deep" / "y.png").exists()
    assert (output / "z.png").exists()


def test_dot_relative_out_is_next_to_first_input(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    images = tmp_path / "project" / "images"
    _image(images / "a.png")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    result = runner.invoke(app, ["optimize", str(images), "--lossless", "--out", "./export"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "project" / "export" / "a.png").exists()
    assert not (elsewhere / "export").exists()


def test_optimize_rejects_quality_with_lossless(tmp_path: Path) -> None:
    images = tmp_path / "images"
    _image(images / "a.png")

    result = runner.invoke(app, ["optimize", str(images), "--quality", "80", "--lossless"])

    assert result.exit_code == 1
    assert "--lossless" in result.output
    assert not (tmp_path / "images-imgwork").exists()


def test_optimize_requires_a_mode(tmp_path: Path) -> None:
    source = _image(tmp_path / "a.png")

    result = runner.invoke(app, ["optimize", str(source)])

    assert result.exit_code == 1
    assert not (tmp_path / "a-imgwork.png").exists()


def test_resize_requires_a_dimension(tmp_path: Path) -> None:
    source = _image(tmp_path / "a.png")

    result = runner.invoke(app, ["resize", str(source)])

    assert result.exit_code == 1


def test_no_images_found_exits_with_error(tmp_path: Path) -> None:
    (tmp_path / "notes.txt").write_text("hello")

    result = runner.invoke(app, ["convert", str(tmp_path), "--to", "png"])

    assert result.exit_code == 1
    assert "没有找到" in result.output


def test_crop_bounds_failure_sets_exit_code(tmp_path: Path) -> None:
    source = _image(tmp_path / "small.jpg", size=(400, 300))

    result = runner.invoke(app, ["crop", str(source), "--w", "800", "--h", "600"])

    assert result.exit_code == 1
    assert "small.jpg" in result.output
    assert not (tmp_path / "small-imgwork.jpg").exists()


def test_partial_failure_reports_and_exits_non_zero(tmp_path: Path) -> None:
    images = tmp_path / "images"
    for name in "abde":
        _image(images / f"{name}.png")
    (images / "c.png").write_text("broken")
    report = tmp_path / "report.csv"

    result = runner.invoke(
        app, ["resize", str(images), "--h", "half", "--out", str(tmp_path / "out"), "--report", str(report)]
    )

    assert result.exit_code == 1
    assert "4/5" in result.output
    assert "c.png" in result.output
    for name in "abde":
        with Image.open(tmp_path / "out" / f"{name}.png") as img:
            assert img.size == (100, 50)
    with report.open("r", encoding="utf-8", newline="") as handle:
        statuses = sorted(row["status"] for row in csv.DictReader(handle))
    assert statuses == ["failed", "processed", "processed", "processed", "processed"]


def test_unknown_format_fails_before_processing(tmp_path: Path) -> None:
    source = _image(tmp_path / "a.png")

    result = runner.invoke(app, ["convert", str(source), "--to", "bmp"])

    assert result.exit_code == 1
    assert not list(tmp_path.glob("a-imgwork*"))


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
