from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from realmshards.core.logging import logger

SETTINGS_FILENAME = ".realmshards_settings.json"

@dataclass
class SettingsData:
    log_level: str = "INFO"                 # DEBUG / INFO / WARN / ERROR
    debug: bool = False                     # Verbose engine diagnostics
    action_delay_ms: int = 0                # Pause between resolved actions (presentation only)
    start_delay_ms: int = 0                 # Pause before leaving the start phase
    battle_log_limit: int = 10              # Most recent battle log lines kept
    default_trainer_action_interval: int = 5
    rng_seed: Optional[int] = None

    def normalize(self):
        self.log_level = str(self.log_level).upper()
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "INFO"
        if self.debug:
            self.log_level = "DEBUG"
        self.action_delay_ms = max(0, int(self.action_delay_ms or 0))
        self.start_delay_ms = max(0, int(self.start_delay_ms or 0))
        if int(self.battle_log_limit or 0) < 1:
            self.battle_log_limit = 10
        if int(self.default_trainer_action_interval or 0) < 1:
            self.default_trainer_action_interval = 5
        if self.rng_seed is not None:
            try:
                self.rng_seed = int(self.rng_seed)
            except (TypeError, ValueError):
                self.rng_seed = None

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def defaults(cls, path: Optional[Path] = None) -> "Settings":
        data = SettingsData()
        data.normalize()
        return cls(data, path or cls._resolve_path())

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data_kwargs = {name: raw[name] for name in field_names if name in raw}
                data = SettingsData(**data_kwargs)
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        return cls.defaults(path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def update(self, **changes):
        for key, value in changes.items():
            if not hasattr(self.data, key):
                raise AttributeError(f"Unknown setting '{key}'")
            setattr(self.data, key, value)
        self.data.normalize()
        self._notify()

    def apply_logging(self):
        logger.set_level(self.data.log_level)

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)

__all__ = ["Settings", "SettingsData", "SETTINGS_FILENAME"]
