"""Tests for application settings, startup and the CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from greenhorn.config import Settings
from greenhorn.exceptions import ConfigError
from greenhorn.main import create_app, lifespan


class TestSettings:
    def test_default_settings(self) -> None:
        s = Settings(_env_file=None)
        assert s.debug is False
        assert s.port == 8000
        assert s.config_file == Path("./Config.toml")

    def test_custom_settings(self, tmp_path: Path) -> None:
        s = Settings(_env_file=None, debug=True, config_file=tmp_path / "site.toml")
        assert s.debug is True
        assert s.config_file == tmp_path / "site.toml"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("CONFIG_FILE", "/srv/site/Config.toml")
        s = Settings(_env_file=None)
        assert s.port == 9000
        assert s.config_file == Path("/srv/site/Config.toml")

    def test_port_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, port=70000)


class TestLifespan:
    @pytest.mark.asyncio
    async def test_loads_site_config(self, test_settings: Settings) -> None:
        app = create_app(test_settings)
        async with lifespan(app):
            assert app.state.site_config.homepage == "a"

    @pytest.mark.asyncio
    async def test_invalid_config_aborts_startup(self, test_settings: Settings) -> None:
        test_settings.config_file.write_text('homepage = "a"\n', encoding="utf-8")
        app = create_app(test_settings)
        with pytest.raises(ConfigError):
            async with lifespan(app):
                pass


class TestCliEntry:
    def test_cli_entry_uses_app_settings(self) -> None:
        from greenhorn.main import app, cli_entry

        original_settings = getattr(app.state, "settings", None)
        app.state.settings = Settings(_env_file=None, host="127.0.0.1", port=9999)

        try:
            with patch("uvicorn.run") as mock_run:
                cli_entry([])

            mock_run.assert_called_once()
            assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9999}
        finally:
            app.state.settings = original_settings

    def test_cli_arguments_override_settings(self, site_dir: Path) -> None:
        from greenhorn.main import cli_entry

        with patch("uvicorn.run") as mock_run:
            cli_entry(
                [
                    "--host",
                    "0.0.0.0",
                    "--port",
                    "8080",
                    "--config-file",
                    str(site_dir / "Config.toml"),
                    "--static-dir",
                    str(site_dir / "static"),
                    "--debug",
                ]
            )

        application = mock_run.call_args.args[0]
        settings: Settings = application.state.settings
        assert settings.config_file == site_dir / "Config.toml"
        assert settings.static_dir == site_dir / "static"
        assert settings.debug is True
        assert mock_run.call_args.kwargs == {"host": "0.0.0.0", "port": 8080}
