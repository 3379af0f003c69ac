"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Optional
from enum import Enum

from linealign.core.diff.line_differ import (
    DEFAULT_MAX_LINE_COUNT,
    DiffAlgorithm,
    DiffOptions,
    WhitespaceMode,
)


@dataclass
class DiffSettings:
    """Settings for line comparison."""
    algorithm: DiffAlgorithm = DiffAlgorithm.MYERS
    ignore_case: bool = False
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_line_endings: bool = True
    max_line_count: int = DEFAULT_MAX_LINE_COUNT

    def to_options(self) -> DiffOptions:
        """Build differ options from these settings."""
        return DiffOptions(
            algorithm=self.algorithm,
            ignore_case=self.ignore_case,
            whitespace_mode=self.whitespace_mode,
            ignore_line_endings=self.ignore_line_endings,
            max_line_count=self.max_line_count,
        )


@dataclass
class AlignmentSettings:
    """Settings for padding and highlight planning."""
    clamp_highlights: bool = True
    emit_highlights: bool = True


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    diff: DiffSettings = field(default_factory=DiffSettings)
    alignment: AlignmentSettings = field(default_factory=AlignmentSettings)


SettingsObserver = Callable[[ApplicationSettings], None]


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[SettingsObserver] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'LineAlign' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'linealign' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}, using defaults: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._to_dict(settings)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

        except OSError as e:
            logging.error(f"SettingsManager - Could not write {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: SettingsObserver) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: SettingsObserver) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception:
                logging.exception("SettingsManager - Settings observer failed")

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def get_enum(enum_class: type, value: Any) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value.upper()]
                except KeyError:
                    return list(enum_class)[0]
            return value

        defaults = DiffSettings()
        diff_data = data.get('diff', {})
        diff = DiffSettings(
            algorithm=get_enum(DiffAlgorithm, diff_data.get('algorithm', defaults.algorithm.name)),
            ignore_case=diff_data.get('ignore_case', defaults.ignore_case),
            whitespace_mode=get_enum(WhitespaceMode, diff_data.get('whitespace_mode', defaults.whitespace_mode.name)),
            ignore_line_endings=diff_data.get('ignore_line_endings', defaults.ignore_line_endings),
            max_line_count=int(diff_data.get('max_line_count', defaults.max_line_count)),
        )

        alignment_data = data.get('alignment', {})
        alignment = AlignmentSettings(
            clamp_highlights=alignment_data.get('clamp_highlights', True),
            emit_highlights=alignment_data.get('emit_highlights', True),
        )

        return ApplicationSettings(
            diff=diff,
            alignment=alignment,
        )
