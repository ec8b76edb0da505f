import matplotlib
matplotlib.use('Agg')

import json

import pytest

from branch_generator.cli import main, parse_codes
from branch_generator.logging_config import setup_logging


def test_parse_codes_accepts_commas_and_spaces():
    assert parse_codes("1,2, 0 1") == [1, 2, 0, 1]
    assert parse_codes("") == []


@pytest.mark.parametrize("text", ["1,x", "1,-2", "1.5"])
def test_parse_codes_rejects_bad_tokens(text):
    with pytest.raises(ValueError):
        parse_codes(text)


def test_branch_command_writes_outputs(tmp_path):
    out = tmp_path / "out"
    rc = main([
        "--output", str(out), "--log-level", "WARNING",
        "branch", "--codes", "1,2,0", "--policy", "queue", "--compare",
    ])
    assert rc == 0
    assert (out / "branches_breadth_first_segments.geojson").exists()
    assert (out / "branches_breadth_first.png").exists()
    assert (out / "policy_comparison.png").exists()


def test_branch_command_handles_no_segments(tmp_path):
    rc = main(["--output", str(tmp_path), "branch", "--codes", "0,0"])
    assert rc == 0
    assert (tmp_path / "branches_depth_first_metrics.json").exists()


def test_subdivide_command(tmp_path):
    rc = main(["--output", str(tmp_path), "subdivide", "--depth", "2"])
    assert rc == 0
    assert (tmp_path / "subdivision.png").exists()


def test_bad_codes_exit_with_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--output", str(tmp_path), "branch", "--codes", "1,a"])
    assert exc.value.code == 2


def test_unknown_log_level_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--log-level", "LOUD", "--output", str(tmp_path), "branch", "--codes", "1"])
    assert exc.value.code == 2


def test_log_level_is_case_insensitive(tmp_path):
    rc = main(["--log-level", "warning", "--output", str(tmp_path), "branch", "--codes", "1"])
    assert rc == 0


def test_bad_plane_in_config_writes_nothing(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"plane": "zz"}))
    out = tmp_path / "out"

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config_file), "--output", str(out), "branch", "--codes", "1"])
    assert exc.value.code == 2
    assert not out.exists()


def test_setup_logging_rejects_unknown_level_name():
    with pytest.raises(ValueError, match="LOUD"):
        setup_logging("LOUD")
