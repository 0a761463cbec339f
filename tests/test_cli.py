import pytest

from alpha_fixer import __version__
from alpha_fixer.cli.fix_transparency import build_parser, main

COLOUR = (10, 20, 30, 255)
CLEAR = (255, 255, 255, 0)


def test_updates_matching_files(write_png, read_png, ring, tmp_path, capsys):
    path = write_png("sprites/ring.png", ring)

    code = main(["-g", str(tmp_path / "**" / "*.png")])

    assert code == 0
    assert f"Updated file: {path}" in capsys.readouterr().out
    assert tuple(read_png(path)[1, 1]) == (10, 20, 30, 0)


def test_average_policy_leaves_isolated_pixel(write_png, read_png, tmp_path, capsys):
    path = write_png("dot.png", [[CLEAR]])

    code = main(["--glob", str(tmp_path / "*.png"), "--policy", "average"])

    assert code == 0
    assert capsys.readouterr().out == ""
    assert tuple(read_png(path)[0, 0]) == CLEAR


def test_sentinel_target(write_png, read_png, tmp_path):
    path = write_png("row.png", [[COLOUR, (1, 2, 3, 0)]])

    assert main(["-g", str(tmp_path / "*.png"), "--target", "sentinel"]) == 0
    assert tuple(read_png(path)[0, 1]) == (1, 2, 3, 0)


def test_bad_pattern_exits_with_2(capsys):
    code = main(["-g", "images/***.png"])

    assert code == 2
    assert "Invalid glob pattern" in capsys.readouterr().err


def test_corrupt_file_exits_with_1_after_processing_the_rest(write_png, ring, tmp_path, capsys):
    (tmp_path / "bad.png").write_bytes(b"garbage")
    good = write_png("good.png", ring)

    code = main(["-g", str(tmp_path / "*.png"), "--workers", "2"])

    assert code == 1
    assert f"Updated file: {good}" in capsys.readouterr().out


def test_fail_fast_exits_with_1(tmp_path):
    (tmp_path / "bad.png").write_bytes(b"garbage")

    assert main(["-g", str(tmp_path / "*.png"), "--fail-fast"]) == 1


def test_glob_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_lowercase_log_level_from_environment_is_accepted(monkeypatch, write_png, ring, tmp_path):
    monkeypatch.setenv("LOG_LEVEL", "info")
    write_png("ring.png", ring)

    assert build_parser().parse_args(["-g", "x.png"]).log_level == "INFO"
    assert main(["-g", str(tmp_path / "*.png")]) == 0


def test_mixed_case_options_are_accepted(write_png, read_png, tmp_path):
    path = write_png("dot.png", [[CLEAR]])

    assert main(["-g", str(tmp_path / "*.png"), "--policy", "Average", "--log-level", "debug"]) == 0
    assert tuple(read_png(path)[0, 0]) == CLEAR


@pytest.mark.parametrize("name, value", [
    ("FILL_POLICY", "median"),
    ("TARGET_MODE", "everything"),
    ("LOG_LEVEL", "loud"),
])
def test_invalid_setting_from_environment_is_a_usage_error(monkeypatch, capsys, tmp_path, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(SystemExit) as excinfo:
        main(["-g", str(tmp_path / "*.png")])

    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
