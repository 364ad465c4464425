import pytest

from realmshards.cli import build_parser, run
from realmshards.core.logging import logger


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    logger.set_level("INFO")


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.species == 4
    assert args.wild == [16]
    assert args.level == 4
    assert args.turns == 50
    assert args.seed is None
    assert not args.quiet and not args.debug


def test_parser_flags():
    args = build_parser().parse_args(["--seed", "3", "--wild", "16", "19", "--level", "6", "--quiet"])
    assert args.seed == 3
    assert args.wild == [16, 19]
    assert args.level == 6
    assert args.quiet


def test_quiet_run(capsys):
    assert run(["--seed", "3", "--quiet"]) == 0
    assert "BATTLE OVER" in capsys.readouterr().out


def test_verbose_run_prints_turns(capsys):
    assert run(["--seed", "8", "--turns", "2"]) == 0
    assert "YOUR TEAM" in capsys.readouterr().out


def test_unknown_species_fails():
    assert run(["--species", "9999", "--quiet"]) == 1
