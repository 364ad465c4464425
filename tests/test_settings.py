import json

import pytest

from realmshards.core.logging import logger
from realmshards.system.settings import Settings, SettingsData


@pytest.fixture(autouse=True)
def restore_log_level():
    yield
    logger.set_level("INFO")


def test_defaults(settings):
    data = settings.data
    assert data.log_level == "INFO"
    assert not data.debug
    assert data.battle_log_limit == 10
    assert data.default_trainer_action_interval == 5
    assert data.action_delay_ms == 0
    assert data.rng_seed is None


def test_normalize_repairs_bad_values():
    data = SettingsData(log_level="loud", battle_log_limit=0, default_trainer_action_interval=-2,
                        action_delay_ms=-50, rng_seed="17")
    data.normalize()
    assert data.log_level == "INFO"
    assert data.battle_log_limit == 10
    assert data.default_trainer_action_interval == 5
    assert data.action_delay_ms == 0
    assert data.rng_seed == 17


def test_debug_forces_debug_level():
    data = SettingsData(log_level="warn", debug=True)
    data.normalize()
    assert data.log_level == "DEBUG"


def test_bad_seed_is_dropped():
    data = SettingsData(rng_seed="not a number")
    data.normalize()
    assert data.rng_seed is None


def test_save_and_load(settings):
    settings.update(battle_log_limit=4, rng_seed=99)
    settings.save()
    loaded = Settings.load(settings.path)
    assert loaded.data.battle_log_limit == 4
    assert loaded.data.rng_seed == 99


def test_load_backfills_missing_and_ignores_unknown(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "warn", "volume": 11}), encoding="utf-8")
    loaded = Settings.load(path)
    assert loaded.data.log_level == "WARN"
    assert loaded.data.battle_log_limit == 10


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    loaded = Settings.load(path)
    assert loaded.data == SettingsData()
    assert loaded.path == path


def test_missing_file_uses_defaults(tmp_path):
    loaded = Settings.load(tmp_path / "absent.json")
    assert loaded.data == SettingsData()


def test_update_rejects_unknown_keys(settings):
    with pytest.raises(AttributeError):
        settings.update(volume=3)


def test_listeners_see_updates(settings):
    seen = []
    settings.on_change(lambda data: seen.append(data.log_level))
    settings.update(debug=True)
    assert seen == ["DEBUG"]


def test_apply_logging(settings):
    settings.update(log_level="ERROR")
    settings.apply_logging()
    assert not logger.is_enabled("WARN")
    assert logger.is_enabled("ERROR")
