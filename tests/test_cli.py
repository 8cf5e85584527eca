from pathlib import Path

import pytest

from bracketview.continuous import cli
from bracketview.scraping.storage import SnapshotCache


@pytest.fixture
def offline(monkeypatch, tmp_path, phase_document):
    """Run the CLI without network, secrets or global logging changes."""
    for name in (
        "STARTGG_TOKEN",
        "BRACKETVIEW_PHASE_ID",
        "BRACKETVIEW_TOURNAMENT",
        "BRACKETVIEW_STREAM",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli, "init_sentry", lambda **kwargs: False)

    cache_file = tmp_path / "cache.json"
    SnapshotCache(cache_file).save(phase_document)
    return ["--cache-file", str(cache_file), "--output-dir", str(tmp_path / "display")]


def test_parser_commands():
    parser = cli.build_parser()
    args = parser.parse_args(["pools", "--phase-id", "5", "--interval", "12", "--once"])
    assert args.command == "pools"
    assert args.phase_id == 5
    assert args.once is True

    config = cli.build_config(args)
    assert config.pool_mode is True
    assert cli.build_strategy(args).bracket_delay == 12.0


def test_interval_must_be_positive():
    args = cli.build_parser().parse_args(["overlay", "--interval", "0"])
    with pytest.raises(ValueError):
        cli.build_strategy(args)


def test_spacing_choice_is_validated():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["bracket", "--spacing", "diagonal"])


def test_bracket_once_renders_from_cache(offline, tmp_path: Path, capsys):
    assert cli.main(["bracket", "--once", *offline]) == 0

    page = tmp_path / "display" / "bracket.html"
    assert "Alpha vs Bravo" in page.read_text(encoding="utf-8")
    assert "'data_source': 'cache'" in capsys.readouterr().out


def test_dump_writes_csv(offline, tmp_path: Path):
    csv_path = tmp_path / "layout.csv"
    assert cli.main(["dump", "--csv", str(csv_path), *offline]) == 0

    lines = csv_path.read_text().splitlines()
    assert lines[0].startswith("side,match_id,round")
    assert len(lines) == 7


def test_status(offline, capsys):
    assert cli.main(["status", *offline]) == 0
    out = capsys.readouterr().out
    assert "Data source: cache" in out
    assert "Pools: A1" in out
    assert "Winners matches: 4" in out
