"""
Configuration management for daynotes stores.

The configuration is stored as a TOML file in the store directory.
It names the vault to watch, the data file holding the note colors,
and the color palette offered when labelling notes.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import tomli_w


CONFIG_FILENAME = "daynotes.toml"
CONFIG_VERSION = 1
DEFAULT_DATA_FILE = "data.json"
DEFAULT_SUFFIXES = [".md"]

# Color for a freshly added palette slot
NEW_PALETTE_COLOR = "#ffffff"

DEFAULT_PALETTE = [
    "#e03131",  # red
    "#f08c00",  # orange
    "#f5c400",  # yellow
    "#2f9e44",  # green
    "#1971c2",  # blue
    "#7048e8",  # violet
]


def get_store_dir(store: Optional[Path] = None) -> Path:
    """
    Resolve the store directory.

    Priority: explicit argument, DAYNOTES_STORE_PATH, ~/.daynotes
    """
    if store is not None:
        return Path(store).expanduser()
    env = os.environ.get("DAYNOTES_STORE_PATH")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".daynotes"


@dataclass
class StoreConfig:
    """Complete store configuration."""
    path: Path
    version: int = CONFIG_VERSION
    created: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    data_file: str = DEFAULT_DATA_FILE

    # Vault
    vault_root: Optional[Path] = None
    suffixes: list[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))

    # Label colors offered to the user, in display order
    palette: list[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def data_path(self) -> Path:
        """Path to the note colors data file."""
        return self.path / self.data_file

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def load_config(store_path: Path) -> StoreConfig:
    """
    Load configuration from a store directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = store_path / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    store = data.get("store", {})
    vault = data.get("vault", {})
    palette = data.get("palette", {})

    # Validate version
    version = store.get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    colors = palette.get("colors", DEFAULT_PALETTE)
    if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
        raise ValueError(f"Invalid palette in {config_path}: colors must be a list of strings")

    suffixes = vault.get("suffixes", DEFAULT_SUFFIXES)
    if isinstance(suffixes, str):
        suffixes = [suffixes]

    root = vault.get("root")
    return StoreConfig(
        path=store_path,
        version=version,
        created=store.get("created", ""),
        data_file=store.get("data_file", DEFAULT_DATA_FILE),
        vault_root=Path(root).expanduser() if root else None,
        suffixes=list(suffixes),
        palette=list(colors),
    )


def save_config(config: StoreConfig) -> None:
    """
    Save configuration to the store directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    vault: dict[str, Any] = {"suffixes": config.suffixes}
    if config.vault_root is not None:
        vault["root"] = str(config.vault_root)

    data = {
        "store": {
            "version": config.version,
            "created": config.created,
            "data_file": config.data_file,
        },
        "vault": vault,
        "palette": {"colors": config.palette},
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(store_path: Path) -> StoreConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    config_path = store_path / CONFIG_FILENAME

    if config_path.exists():
        return load_config(store_path)
    else:
        config = StoreConfig(path=store_path)
        save_config(config)
        return config


# -----------------------------------------------------------------------------
# Palette editing
#
# Indexes are 0-based here; the CLI shows 1-based slot numbers.
# Each helper saves the config.
# -----------------------------------------------------------------------------

def _check_index(config: StoreConfig, index: int) -> None:
    if not 0 <= index < len(config.palette):
        raise IndexError(f"No palette slot {index + 1} (palette has {len(config.palette)})")


def add_palette_color(config: StoreConfig, color: str = NEW_PALETTE_COLOR) -> None:
    config.palette.append(color)
    save_config(config)


def update_palette_color(config: StoreConfig, index: int, color: str) -> None:
    _check_index(config, index)
    config.palette[index] = color
    save_config(config)


def remove_palette_color(config: StoreConfig, index: int) -> str:
    """Remove a palette slot and return its color."""
    _check_index(config, index)
    color = config.palette.pop(index)
    save_config(config)
    return color


def reset_palette(config: StoreConfig) -> None:
    """Restore the original palette."""
    config.palette = list(DEFAULT_PALETTE)
    save_config(config)
