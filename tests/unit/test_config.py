"""Unit tests for AudioscribeConfig."""

import os

import pytest

from audioscribe.config import AudioscribeConfig


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "audioscribe.yaml"
    path.write_text(
        "transcription:\n"
        "  backend: google\n"
        "  language: en\n"
        "google_cloud:\n"
        "  credentials_path: creds/service.json\n"
        "logging:\n"
        "  file_path: logs/app.log\n",
        encoding="utf-8",
    )
    return path


@pytest.mark.unit
class TestAudioscribeConfig:

    def test_defaults_without_file(self):
        config = AudioscribeConfig()

        assert config.get('audio.sample_rate') == 16000
        assert config.get('transcription.backend') == 'deepgram'
        assert config.get('derivation.summary_type') == 'medium'

    def test_load_yaml_merges_defaults(self, config_file):
        config = AudioscribeConfig(str(config_file))

        assert config.get('transcription.backend') == 'google'
        assert config.get('transcription.language') == 'en'
        assert config.get('transcription.timeout_seconds') == 60.0
        assert config.get('llm.model') == 'gpt-4o-mini'

    def test_relative_paths_resolved_against_config_dir(self, config_file):
        config = AudioscribeConfig(str(config_file))

        assert config.get('google_cloud.credentials_path') == str(config_file.parent / "creds/service.json")
        assert config.get('logging.file_path') == str(config_file.parent / "logs/app.log")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AudioscribeConfig(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ValueError):
            AudioscribeConfig(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("audio: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError):
            AudioscribeConfig(str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ValueError):
            AudioscribeConfig(str(path))

    def test_get_default_for_unknown_key(self):
        config = AudioscribeConfig()

        assert config.get('nope.missing', 'fallback') == 'fallback'
        assert config.get('audio.sample_rate.deeper') is None

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPGRAM_API_KEY", "env-key")
        config = AudioscribeConfig()

        assert config.get('deepgram.api_key') == 'env-key'

    def test_blank_secret_falls_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPGRAM_API_KEY", "env-key")
        config = AudioscribeConfig.from_dict({"deepgram": {"api_key": ""}})

        assert config.require('deepgram.api_key') == 'env-key'

    def test_file_value_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        config = AudioscribeConfig.from_dict({"llm": {"api_key": "file-key"}})

        assert config.get('llm.api_key') == 'file-key'

    def test_require_missing_names_env_variable(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config = AudioscribeConfig()

        with pytest.raises(ValueError) as excinfo:
            config.require('llm.api_key')

        assert "OPENAI_API_KEY" in str(excinfo.value)

    def test_set_creates_nested_keys(self):
        config = AudioscribeConfig()

        config.set('derivation.default_target_language', 'es')
        config.set('custom.nested.value', 3)

        assert config.get('derivation.default_target_language') == 'es'
        assert config.get('custom.nested.value') == 3

    def test_from_dict_does_not_mutate_defaults(self):
        AudioscribeConfig.from_dict({"audio": {"sample_rate": 8000}})

        assert AudioscribeConfig().get('audio.sample_rate') == 16000

    def test_google_credentials_path_must_exist(self, tmp_path):
        creds = tmp_path / "service.json"
        config = AudioscribeConfig.from_dict({"google_cloud": {"credentials_path": str(creds)}})

        with pytest.raises(FileNotFoundError):
            config.get_google_credentials_path()

        creds.write_text("{}", encoding="utf-8")
        assert config.get_google_credentials_path() == os.path.abspath(creds)
