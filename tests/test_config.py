"""Tests for configuration loading."""

from ffmpeg_tools.core.config import (
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_DIR,
    RunnerConfig,
    get_config,
    load_config,
    set_config,
)


class TestRunnerConfig:
    """Tests for RunnerConfig."""

    def test_defaults(self):
        config = RunnerConfig()
        assert config.upload_dir == DEFAULT_UPLOAD_DIR == "./uploads"
        assert config.timeout == DEFAULT_TIMEOUT == 600.0
        assert config.allowed_executables == ("ffmpeg", "ffprobe")
        assert config.overwrite_output is True

    def test_ensure_upload_dir_creates_once(self, tmp_path):
        config = RunnerConfig(upload_dir=str(tmp_path / "a" / "b"))
        path = config.ensure_upload_dir()
        assert path.is_dir()
        assert config.ensure_upload_dir() == path

    def test_from_mapping_coerces_types(self):
        config = RunnerConfig.from_mapping({
            "timeout": "30",
            "allowed_executables": ["ffmpeg"],
            "ffmpeg_binary": "/opt/ffmpeg/bin/ffmpeg",
        })
        assert config.timeout == 30.0
        assert config.allowed_executables == ("ffmpeg",)
        assert config.ffmpeg_binary == "/opt/ffmpeg/bin/ffmpeg"

    def test_from_mapping_ignores_unknown_keys(self):
        config = RunnerConfig.from_mapping({"retries": 3, "overwrite_output": False})
        assert config.overwrite_output is False
        assert not hasattr(config, "retries")


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("upload_dir: /srv/media\ntimeout: 900\noverwrite_output: false\n")
        config = load_config(path)
        assert config.upload_dir == "/srv/media"
        assert config.timeout == 900.0
        assert config.overwrite_output is False

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == RunnerConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == RunnerConfig()

    def test_non_mapping_gives_defaults(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert load_config(path) == RunnerConfig()

    def test_invalid_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("timeout: [unclosed\n")
        assert load_config(path) == RunnerConfig()


def test_global_config_roundtrip():
    custom = RunnerConfig(timeout=5.0)
    set_config(custom)
    assert get_config() is custom
    set_config(None)
    assert get_config() == RunnerConfig()
