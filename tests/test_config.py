"""Test configuration loading."""

import pytest

from ghexplore.core.config import load_settings

ENV_VARS = [
    "GITHUB_TOKEN", "GITHUB_API_URL", "GITHUB_TIMEOUT", "SUMMARIZER", "SUMMARY_MODEL",
    "SUMMARY_NUM_CTX", "OLLAMA_BASE_URL", "LANGFUSE_ENABLED", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConfiguration:

    def test_load_settings_default(self):
        """Missing config file gives the built-in defaults."""
        s = load_settings("nonexistent_config.toml")
        assert s.github_api_url == "https://api.github.com"
        assert s.github_token is None
        assert s.max_pages == 10
        assert s.per_page == 100
        assert s.page_size == 12
        assert s.summarizer_kind == "basic"
        assert s.langfuse_enabled is False

    def test_load_settings_with_config(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[github]\nmax_pages = 3\nper_page = 50\napi_url = "https://ghe.example.com/api/v3/"\n'
            '[view]\npage_size = 20\n'
            '[summarizer]\nkind = "ollama"\nmodel = "qwen2.5:7b"\n',
            encoding="utf-8",
        )
        s = load_settings(str(path))
        assert s.max_pages == 3
        assert s.per_page == 50
        assert s.github_api_url == "https://ghe.example.com/api/v3"
        assert s.page_size == 20
        assert s.summarizer_kind == "ollama"
        assert s.model == "qwen2.5:7b"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[summarizer]\nkind = "basic"\nnum_ctx = 2048\n', encoding="utf-8")
        monkeypatch.setenv("SUMMARIZER", "ollama")
        monkeypatch.setenv("SUMMARY_NUM_CTX", "4096")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
        monkeypatch.setenv("LANGFUSE_ENABLED", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        s = load_settings()

        assert s.summarizer_kind == "ollama"
        assert s.num_ctx == 4096
        assert s.github_token == "ghp_test"
        assert s.langfuse_enabled is True
        assert s.log_level == "DEBUG"
