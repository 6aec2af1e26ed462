import textwrap

import pytest

from subpeak.peak_core.config_loader import (
    apply_sets,
    dump_effective_config,
    load_run_config,
    locator_config_from,
    merge_dicts,
    parse_scalar,
)


def test_parse_scalar():
    assert parse_scalar("true") is True
    assert parse_scalar("False") is False
    assert parse_scalar("4") == 4
    assert parse_scalar("2.5") == 2.5
    assert parse_scalar("data/x.tsv") == "data/x.tsv"


def test_merge_dicts_is_deep():
    a = {"locator": {"error_range": 3}, "input": {"signals_tsv": "a.tsv"}}
    b = {"locator": {"error_range": 5}}
    out = merge_dicts(a, b)
    assert out == {"locator": {"error_range": 5}, "input": {"signals_tsv": "a.tsv"}}
    assert a["locator"]["error_range"] == 3


def test_apply_sets_dotted_keys():
    cfg = apply_sets({}, ["locator.error_range=6", "output.out_tsv=o.tsv"])
    assert cfg == {"locator": {"error_range": 6}, "output": {"out_tsv": "o.tsv"}}
    with pytest.raises(ValueError):
        apply_sets({}, ["locator.error_range"])


def test_locator_overrides_must_be_numeric():
    with pytest.raises(ValueError, match="requires a number"):
        apply_sets({}, ["locator.error_range=abc"])
    with pytest.raises(ValueError, match="requires a number"):
        apply_sets({}, ["locator.error_range=true"])
    # other tables still accept strings
    assert apply_sets({}, ["input.signals_tsv=abc"]) == {"input": {"signals_tsv": "abc"}}


def test_defaults_without_run_file(tmp_path):
    cfg, summary = load_run_config(str(tmp_path), None)
    assert cfg["locator"]["error_range"] == 3
    assert summary == {"config_path": None, "include_path": None}
    assert locator_config_from(cfg).error_range == 3


def test_run_file_with_include_and_overrides(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "base.toml").write_text(
        textwrap.dedent(
            """
            [locator]
            error_range = 2

            [input]
            signals_tsv = "data/base.tsv"
            """
        )
    )
    (tmp_path / "run.toml").write_text(
        textwrap.dedent(
            """
            include = "config/base.toml"

            [input]
            signals_tsv = "data/run.tsv"
            """
        )
    )
    cfg, summary = load_run_config(
        str(tmp_path), "run.toml", ["locator.error_range=5"]
    )
    assert cfg["input"]["signals_tsv"] == "data/run.tsv"
    assert cfg["locator"]["error_range"] == 5
    assert "include" not in cfg
    assert summary["include_path"].endswith("base.toml")
    assert locator_config_from(cfg).error_range == 5


def test_missing_files_raise(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_run_config(str(tmp_path), "nope.toml")
    (tmp_path / "run.toml").write_text('include = "missing.toml"\n')
    with pytest.raises(FileNotFoundError):
        load_run_config(str(tmp_path), "run.toml")


def test_invalid_error_range_in_config(tmp_path):
    cfg, _ = load_run_config(str(tmp_path), None, ["locator.error_range=0"])
    with pytest.raises(ValueError):
        locator_config_from(cfg)


def test_dump_effective_config_is_toml(tmp_path):
    cfg, _ = load_run_config(str(tmp_path), None, ["input.signals_tsv=s.tsv"])
    text = dump_effective_config(cfg)
    assert "[locator]" in text
    assert "error_range = 3" in text
    assert 'signals_tsv = "s.tsv"' in text
