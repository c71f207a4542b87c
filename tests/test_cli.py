from __future__ import annotations

from pathlib import Path

import PIL.Image
import pytest

import ifs_cli


def _tiny(*args: str) -> list[str]:
    return [*args, "--x-res", "8", "--y-res", "8"]


def test_parser_defaults() -> None:
    opt = ifs_cli.build_parser().parse_args(["julia"])
    assert (opt.frames, opt.workers, opt.path) == (64, 4, "Angor")
    assert (opt.max_iterations, opt.bailout) == (400, 10.0)
    assert (opt.x_res, opt.y_res, opt.x_width, opt.y_width) == (1024, 1024, 4.0, 4.0)
    assert opt.on_error == "raise"


def test_unknown_path_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        ifs_cli.build_parser().parse_args(["julia", "--path", "Spiral"])
    assert excinfo.value.code == 2


def test_output_suffix_must_match_format(tmp_path: Path) -> None:
    parser = ifs_cli.build_parser()
    opt = parser.parse_args(["newton", "--output", str(tmp_path / "out.jpg")])
    with pytest.raises(SystemExit):
        ifs_cli.resolve_output_config(opt, parser)


def test_animation_output_gets_gif_suffix(tmp_path: Path) -> None:
    parser = ifs_cli.build_parser()
    opt = parser.parse_args(["julia", "--output", str(tmp_path / "anim")])
    config = ifs_cli.resolve_output_config(opt, parser)
    assert config.output.name == "anim.gif"

    opt = parser.parse_args(["julia", "--output", str(tmp_path / "anim.png")])
    with pytest.raises(SystemExit):
        ifs_cli.resolve_output_config(opt, parser)


@pytest.mark.integration
def test_julia_single_writes_png(tmp_path: Path) -> None:
    output = tmp_path / "julia.png"
    ifs_cli.main(_tiny("julia-single", "--re", "-0.4", "--im", "0.6", "--output", str(output)))

    with PIL.Image.open(output) as image:
        assert image.size == (8, 8)
        assert image.mode == "RGBA"


@pytest.mark.integration
def test_julia_writes_gif_and_frames(tmp_path: Path) -> None:
    output = tmp_path / "anim.gif"
    frame_dir = tmp_path / "frames"
    ifs_cli.main(_tiny(
        "julia", "--frames", "3", "--workers", "2", "--path", "Exp",
        "--max-iterations", "30", "--output", str(output), "--frame-dir", str(frame_dir),
    ))

    assert output.is_file()
    assert sorted(path.name for path in frame_dir.iterdir()) == ["frame000.png", "frame001.png", "frame002.png"]


def test_zero_frames_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        ifs_cli.main(_tiny("julia", "--frames", "0", "--output", str(tmp_path / "anim.gif")))
    assert excinfo.value.code == 2
    assert not (tmp_path / "anim.gif").exists()


def test_unknown_colormap_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        ifs_cli.main(_tiny("julia-single", "--colormap", "no-such-map", "--output", str(tmp_path / "j.png")))
    assert excinfo.value.code == 2
