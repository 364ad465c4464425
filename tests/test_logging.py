import io

from realmshards.core.logging import Logger


def test_events_carry_key_values():
    out = io.StringIO()
    log = Logger("DEBUG", stream=out)
    log.info("BattleStart", kind="wild", enemies=2)
    line = out.getvalue()
    assert "[INFO] BattleStart kind=wild enemies=2" in line
    assert line.endswith("\n")


def test_threshold_filters_lower_levels():
    out = io.StringIO()
    log = Logger("WARN", stream=out)
    log.debug("Hidden")
    log.info("AlsoHidden")
    log.error("Shown")
    assert "Hidden" not in out.getvalue()
    assert "Shown" in out.getvalue()


def test_set_level_accepts_any_case_and_falls_back():
    log = Logger("INFO", stream=io.StringIO())
    log.set_level("debug")
    assert log.is_enabled("DEBUG")
    log.set_level("chatty")
    assert not log.is_enabled("DEBUG")
    assert log.is_enabled("INFO")
