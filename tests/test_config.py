"""Tests for configuration handling"""
import json
from pathlib import Path

import pytest

from git_wt.config import Config, build_config, load_config_file, ROOT_ENV_VAR


class TestConfig:
    """Test the Config dataclass."""

    def test_defaults(self):
        config = Config()
        assert config.worktrees_root == Path.home() / ".worktrees"
        assert config.tags_filename == ".wt-tags"
        assert config.folder_filler == "-"
        assert config.remote_name == "origin"
        assert config.base_branches == ["main", "master"]

    def test_root_is_made_absolute(self):
        config = Config(worktrees_root="~/trees")
        assert config.worktrees_root == Path.home() / "trees"
        assert config.worktrees_root.is_absolute()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("tags_filename", ""),
            ("tags_filename", "a/b"),
            ("folder_filler", "/"),
            ("folder_filler", "--"),
            ("remote_name", " "),
            ("base_branches", []),
        ],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValueError):
            Config(**{field: value})

    def test_from_dict_ignores_unknown_keys(self, temp_dir):
        config = Config.from_dict({"worktrees_root": str(temp_dir), "colour": "blue"})
        assert config.worktrees_root == temp_dir

    def test_to_dict_round_trip(self, temp_dir):
        config = Config(worktrees_root=temp_dir, remote_name="upstream")
        assert Config.from_dict(config.to_dict()) == config


class TestBuildConfig:
    """Test configuration precedence."""

    def test_defaults_without_file_or_env(self, temp_dir):
        config = build_config(config_file=temp_dir / "missing.json", environ={})
        assert config.worktrees_root == Path.home() / ".worktrees"

    def test_file_then_env_then_overrides(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({"worktrees_root": str(temp_dir / "file"), "remote_name": "upstream"}))

        from_file = build_config(config_file=config_file, environ={})
        assert from_file.worktrees_root == temp_dir / "file"
        assert from_file.remote_name == "upstream"

        from_env = build_config(config_file=config_file, environ={ROOT_ENV_VAR: str(temp_dir / "env")})
        assert from_env.worktrees_root == temp_dir / "env"

        from_cli = build_config(
            overrides={"worktrees_root": str(temp_dir / "cli"), "verbose": None},
            config_file=config_file,
            environ={ROOT_ENV_VAR: str(temp_dir / "env")},
        )
        assert from_cli.worktrees_root == temp_dir / "cli"
        assert from_cli.verbose is False

    def test_malformed_file(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text("{not json")
        with pytest.raises(ValueError):
            load_config_file(config_file)

    def test_non_object_file(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text("[1, 2]")
        with pytest.raises(ValueError):
            build_config(config_file=config_file, environ={})
