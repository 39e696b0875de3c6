"""Tests for TOML store configuration and palette editing."""

from pathlib import Path

import pytest

from daynotes.config import (
    CONFIG_FILENAME,
    DEFAULT_PALETTE,
    NEW_PALETTE_COLOR,
    StoreConfig,
    add_palette_color,
    get_store_dir,
    load_config,
    load_or_create_config,
    remove_palette_color,
    reset_palette,
    save_config,
    update_palette_color,
)


class TestStoreDir:

    def test_explicit_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DAYNOTES_STORE_PATH", str(tmp_path / "env"))
        assert get_store_dir(tmp_path / "explicit") == tmp_path / "explicit"

    def test_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DAYNOTES_STORE_PATH", str(tmp_path / "env"))
        assert get_store_dir() == tmp_path / "env"

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv("DAYNOTES_STORE_PATH", raising=False)
        assert get_store_dir() == Path.home() / ".daynotes"


class TestLoadSave:

    def test_create_writes_defaults(self, tmp_path):
        config = load_or_create_config(tmp_path)
        assert (tmp_path / CONFIG_FILENAME).exists()
        assert config.palette == DEFAULT_PALETTE
        assert config.suffixes == [".md"]
        assert config.vault_root is None
        assert config.data_path == tmp_path / "data.json"

    def test_round_trip(self, tmp_path):
        config = StoreConfig(
            path=tmp_path,
            vault_root=tmp_path / "notes",
            suffixes=[".md", ".txt"],
            palette=["#000000", "var(--color-red)"],
            data_file="colors.json",
        )
        save_config(config)
        loaded = load_config(tmp_path)
        assert loaded.vault_root == tmp_path / "notes"
        assert loaded.suffixes == [".md", ".txt"]
        assert loaded.palette == ["#000000", "var(--color-red)"]
        assert loaded.data_path == tmp_path / "colors.json"
        assert loaded.created == config.created

    def test_load_existing_does_not_overwrite(self, tmp_path):
        config = load_or_create_config(tmp_path)
        config.palette = ["#123456"]
        save_config(config)
        assert load_or_create_config(tmp_path).palette == ["#123456"]

    def test_missing_config_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path)

    def test_newer_version_rejected(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[store]\nversion = 99\n")
        with pytest.raises(ValueError, match="newer"):
            load_config(tmp_path)

    def test_invalid_palette_rejected(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[palette]\ncolors = [1, 2]\n")
        with pytest.raises(ValueError, match="palette"):
            load_config(tmp_path)

    def test_sparse_config_uses_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('[vault]\nroot = "/srv/notes"\nsuffixes = ".md"\n')
        config = load_config(tmp_path)
        assert config.vault_root == Path("/srv/notes")
        assert config.suffixes == [".md"]
        assert config.palette == DEFAULT_PALETTE


class TestPalette:

    @pytest.fixture
    def config(self, tmp_path):
        return load_or_create_config(tmp_path)

    def test_add_default_slot(self, config, tmp_path):
        add_palette_color(config)
        assert config.palette[-1] == NEW_PALETTE_COLOR
        assert load_config(tmp_path).palette[-1] == NEW_PALETTE_COLOR

    def test_add_color(self, config, tmp_path):
        add_palette_color(config, "#abcdef")
        assert load_config(tmp_path).palette == DEFAULT_PALETTE + ["#abcdef"]

    def test_update(self, config, tmp_path):
        update_palette_color(config, 0, "#000000")
        assert load_config(tmp_path).palette[0] == "#000000"

    def test_remove(self, config, tmp_path):
        removed = remove_palette_color(config, 1)
        assert removed == DEFAULT_PALETTE[1]
        assert load_config(tmp_path).palette == DEFAULT_PALETTE[:1] + DEFAULT_PALETTE[2:]

    def test_out_of_range(self, config):
        with pytest.raises(IndexError):
            remove_palette_color(config, len(DEFAULT_PALETTE))
        with pytest.raises(IndexError):
            update_palette_color(config, -1, "#000")

    def test_reset(self, config, tmp_path):
        config.palette.clear()
        save_config(config)
        reset_palette(config)
        assert load_config(tmp_path).palette == DEFAULT_PALETTE

    def test_reset_is_independent_copy(self, config):
        reset_palette(config)
        config.palette.append("#fff")
        assert "#fff" not in DEFAULT_PALETTE
