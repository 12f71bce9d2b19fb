"""Settings resolution: defaults, environment, explicit overrides."""

from pathlib import Path

import pytest

from storefront.infrastructure.settings import DEFAULT_DATA_DIR, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ("STOREFRONT_DATA_DIR", "STOREFRONT_LOG_LEVEL", "STOREFRONT_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path / "shop"))
        monkeypatch.setenv("STOREFRONT_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.orders_file == tmp_path / "shop" / "orders.json"
        assert settings.log_level == "DEBUG"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("STOREFRONT_LOG_FORMAT=json\n", encoding="utf-8")
        assert load_settings().log_format == "json"

    def test_overrides_win_and_none_falls_through(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_LOG_LEVEL", "error")
        settings = load_settings({"data_dir": Path("/srv/shop"), "log_level": None})
        assert settings.users_file == Path("/srv/shop/users.json")
        assert settings.log_level == "ERROR"
