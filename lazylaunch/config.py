"""Typed launcher configuration persisted as TOML.

Loading is lenient: a missing file yields defaults (written back immediately),
malformed TOML yields defaults, and each invalid field falls back to its own
default without discarding its valid neighbours.
"""

from __future__ import annotations

import hashlib
import json
import logging
import tomllib
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path

import tomli_w

from .errors import ConfigInvalid, StoreIOError
from .persistence import paths
from .persistence.binfmt import atomic_write_bytes

logger = logging.getLogger(__name__)


class SearchMode(str, Enum):
    """Matching tier used for ranking or folder filtering."""

    PREFIX = "prefix"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"


class ThemePreset(str, Enum):
    OBSIDIAN = "obsidian"
    PAPER = "paper"
    SOLARIZED = "solarized"


@dataclass
class HotkeyConfig:
    modifier: str = "Alt"
    key: str = "Q"


@dataclass
class GeneralConfig:
    hotkey_toggle: bool = True
    show_on_startup: bool = False
    auto_hide_on_focus_lost: bool = True
    show_tray_icon: bool = True
    ime_off_on_show: bool = False
    show_title_bar: bool = False


@dataclass
class AppearanceConfig:
    max_results: int = 8
    window_width: int = 600
    top_n_history: int = 200
    max_history_display: int = 8
    show_icons: bool = True


@dataclass
class VisualConfig:
    preset: ThemePreset = ThemePreset.OBSIDIAN
    background_color: str = "#282828"
    input_background_color: str = "#383838"
    text_color: str = "#E0E0E0"
    selected_row_color: str = "#505050"
    hint_text_color: str = "#808080"
    font_family: str = "Segoe UI"
    font_size: int = 15


@dataclass
class SearchConfig:
    normal_mode: SearchMode = SearchMode.FUZZY
    folder_mode: SearchMode = SearchMode.FUZZY
    show_hidden_system: bool = False


@dataclass(frozen=True)
class ScanPath:
    """One configured scan root with its extension allow-list."""

    path: str
    extensions: tuple[str, ...] = ()
    include_folders: bool = False

    def normalized_extensions(self) -> frozenset[str]:
        """Lowercased extensions, each with a leading dot."""
        normalized: set[str] = set()
        for ext in self.extensions:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.add(ext if ext.startswith(".") else f".{ext}")
        return frozenset(normalized)


@dataclass
class PathsConfig:
    additional: list[str] = field(default_factory=list)
    scan: list[ScanPath] = field(default_factory=list)


@dataclass
class Config:
    hotkey: HotkeyConfig = field(default_factory=HotkeyConfig)
    general: GeneralConfig = field(default_factory=GeneralConfig)
    appearance: AppearanceConfig = field(default_factory=AppearanceConfig)
    visual: VisualConfig = field(default_factory=VisualConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def to_dict(self) -> dict[str, object]:
        """Return a TOML-serializable mapping."""
        data = asdict(self)
        for section in ("visual", "search"):
            data[section] = {
                key: value.value if isinstance(value, Enum) else value
                for key, value in data[section].items()
            }
        data["paths"]["scan"] = [
            {
                "path": scan_path.path,
                "extensions": list(scan_path.extensions),
                "include_folders": scan_path.include_folders,
            }
            for scan_path in self.paths.scan
        ]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Config:
        """Build a config from parsed TOML, defaulting invalid fields one by one."""
        return cls(
            hotkey=_load_section(HotkeyConfig, data, "hotkey"),
            general=_load_section(GeneralConfig, data, "general"),
            appearance=_load_section(AppearanceConfig, data, "appearance"),
            visual=_load_section(VisualConfig, data, "visual"),
            paths=_load_paths(data.get("paths")),
            search=_load_section(SearchConfig, data, "search"),
        )


def _report(error: ConfigInvalid) -> None:
    logger.warning("%s; using default", error)


def _coerce_field(name: str, raw: object, default: object) -> object:
    """Validate ``raw`` against the type of ``default``; raise ``ConfigInvalid`` on mismatch."""
    if isinstance(default, Enum):
        try:
            return type(default)(raw)
        except ValueError as exc:
            raise ConfigInvalid(name, f"unknown value {raw!r}") from exc
    if isinstance(default, bool):
        if not isinstance(raw, bool):
            raise ConfigInvalid(name, f"expected boolean, got {raw!r}")
        return raw
    if isinstance(default, int):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ConfigInvalid(name, f"expected integer, got {raw!r}")
        if raw < 1:
            raise ConfigInvalid(name, f"expected a positive integer, got {raw}")
        return raw
    if isinstance(default, str):
        if not isinstance(raw, str):
            raise ConfigInvalid(name, f"expected string, got {raw!r}")
        return raw
    return raw


def _load_section(section_cls: type, data: dict[str, object], section_name: str):
    defaults = section_cls()
    raw_section = data.get(section_name)
    if raw_section is None:
        return defaults
    if not isinstance(raw_section, dict):
        _report(ConfigInvalid(section_name, "expected a table"))
        return defaults

    values: dict[str, object] = {}
    for section_field in fields(section_cls):
        key = section_field.name
        default = getattr(defaults, key)
        if key not in raw_section:
            values[key] = default
            continue
        try:
            values[key] = _coerce_field(f"{section_name}.{key}", raw_section[key], default)
        except ConfigInvalid as exc:
            _report(exc)
            values[key] = default
    return section_cls(**values)


def _load_string_list(name: str, raw: object) -> list[str]:
    if not isinstance(raw, list):
        _report(ConfigInvalid(name, "expected an array of strings"))
        return []
    kept: list[str] = []
    for item in raw:
        if isinstance(item, str) and item.strip():
            kept.append(item)
        else:
            _report(ConfigInvalid(name, f"dropping entry {item!r}"))
    return kept


def _load_scan_path(index: int, raw: object) -> ScanPath | None:
    name = f"paths.scan[{index}]"
    if not isinstance(raw, dict):
        _report(ConfigInvalid(name, "expected a table"))
        return None
    path = raw.get("path")
    if not isinstance(path, str) or not path.strip():
        _report(ConfigInvalid(f"{name}.path", "missing scan path"))
        return None
    extensions = _load_string_list(f"{name}.extensions", raw.get("extensions", []))
    include_folders = raw.get("include_folders", False)
    if not isinstance(include_folders, bool):
        _report(ConfigInvalid(f"{name}.include_folders", f"expected boolean, got {include_folders!r}"))
        include_folders = False
    return ScanPath(path=path, extensions=tuple(extensions), include_folders=include_folders)


def _load_paths(raw: object) -> PathsConfig:
    if raw is None:
        return PathsConfig()
    if not isinstance(raw, dict):
        _report(ConfigInvalid("paths", "expected a table"))
        return PathsConfig()

    additional = _load_string_list("paths.additional", raw.get("additional", []))
    raw_scan = raw.get("scan", [])
    if not isinstance(raw_scan, list):
        _report(ConfigInvalid("paths.scan", "expected an array of tables"))
        raw_scan = []
    scan = [
        scan_path
        for index, item in enumerate(raw_scan)
        if (scan_path := _load_scan_path(index, item)) is not None
    ]
    return PathsConfig(additional=additional, scan=scan)


def apply_reserved_hotkey_rule(config: Config) -> bool:
    """Rewrite Alt+Space, which the OS reserves for the window menu, to Alt+Q.

    Returns whether the config was changed.
    """
    hotkey = config.hotkey
    if hotkey.modifier.strip().lower() == "alt" and hotkey.key.strip().lower() == "space":
        hotkey.key = "Q"
        return True
    return False


def is_first_run(path: Path | None = None) -> bool:
    """Return whether no config file exists yet. Call before ``load_config``."""
    return not (path or paths.config_path()).exists()


def save_config(config: Config, path: Path | None = None) -> None:
    """Persist ``config`` as TOML. Raises ``StoreIOError`` when it cannot be written."""
    target = path or paths.config_path()
    atomic_write_bytes(target, tomli_w.dumps(config.to_dict()).encode("utf-8"))


def _save_quietly(config: Config, path: Path) -> None:
    try:
        save_config(config, path)
    except StoreIOError as exc:
        logger.warning("Could not persist config: %s", exc)


def load_config(path: Path | None = None) -> Config:
    """Load the config, filling defaults for anything missing or invalid.

    A missing file is created with defaults. Malformed TOML is reported and
    replaced in memory by defaults, leaving the user's file untouched.
    """
    target = path or paths.config_path()
    try:
        text = target.read_text(encoding="utf-8")
    except FileNotFoundError:
        config = Config()
        _save_quietly(config, target)
        return config
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read config %s: %s; using defaults", target, exc)
        return Config()

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        _report(ConfigInvalid("<file>", f"malformed TOML ({exc})"))
        return Config()

    config = Config.from_dict(data)
    if apply_reserved_hotkey_rule(config):
        logger.info("Rewrote reserved hotkey Alt+Space to Alt+Q")
        _save_quietly(config, target)
    return config


def hash_paths(paths_config: PathsConfig) -> int:
    """Stable 64-bit digest of the scan configuration.

    Extension order inside one scan path does not matter; the order of
    ``additional`` entries and scan paths does, since it decides which
    duplicate name survives indexing.
    """
    canonical = [
        list(paths_config.additional),
        [
            [scan_path.path, sorted(scan_path.normalized_extensions()), scan_path.include_folders]
            for scan_path in paths_config.scan
        ],
    ]
    encoded = json.dumps(canonical, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(encoded, digest_size=8).digest(), "little")


__all__ = [
    "SearchMode",
    "ThemePreset",
    "HotkeyConfig",
    "GeneralConfig",
    "AppearanceConfig",
    "VisualConfig",
    "SearchConfig",
    "ScanPath",
    "PathsConfig",
    "Config",
    "apply_reserved_hotkey_rule",
    "is_first_run",
    "load_config",
    "save_config",
    "hash_paths",
]
