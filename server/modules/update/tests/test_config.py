"""
Тесты для конфигурации Update Module
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from modules.update.config import UpdateConfig


class TestUpdateConfig:
    """Тесты для конфигурации сервера обновлений"""

    def test_config_default_values(self):
        """Тест значений по умолчанию"""
        config = UpdateConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.release_dir == "release"
        assert config.manifest_filename == "latest-mac.yml"
        assert config.download_url_prefix == "./download/"
        assert config.cors_enabled is True
        assert config.manifest_path == Path("release") / "latest-mac.yml"

    def test_config_from_environment(self):
        """Тест загрузки конфигурации из переменных окружения"""
        env = {
            'UPDATE_SERVER_PORT': '8081',
            'UPDATE_RELEASE_DIR': '/srv/release',
            'UPDATE_DOWNLOAD_PREFIX': '/download/',
            'UPDATE_CORS': 'false',
            'UPDATE_LOG_DOWNLOADS': 'false'
        }

        with patch.dict('os.environ', env, clear=True):
            config = UpdateConfig.from_env()

        assert config.port == 8081
        assert config.release_path == Path('/srv/release')
        assert config.download_url_prefix == '/download/'
        assert config.cors_enabled is False
        assert config.log_downloads is False
        assert config.log_requests is True

    def test_config_port_falls_back_to_default(self):
        """Без UPDATE_SERVER_PORT используется порт по умолчанию"""
        with patch.dict('os.environ', {}, clear=True):
            config = UpdateConfig.from_env()

        assert config.port == 3000

    def test_config_invalid_port_in_environment(self):
        """Нечисловой порт - ошибка при старте"""
        with patch.dict('os.environ', {'UPDATE_SERVER_PORT': 'abc'}, clear=True):
            with pytest.raises(ValueError):
                UpdateConfig.from_env()

    def test_config_dict_round_trip(self):
        """from_dict/to_dict"""
        config = UpdateConfig.from_dict({'port': 9000, 'release_dir': 'builds'})

        data = config.to_dict()

        assert data['port'] == 9000
        assert data['release_dir'] == 'builds'
        assert UpdateConfig.from_dict(data) == config

    @pytest.mark.parametrize("overrides", [
        {'port': 0},
        {'port': 70000},
        {'chunk_size': 0},
        {'manifest_filename': ''},
    ])
    def test_config_is_valid_rejects(self, overrides):
        """Проверка невалидных значений"""
        assert UpdateConfig(**overrides).is_valid() is False

    def test_config_valid_without_release_dir(self, tmp_path):
        """Отсутствие release директории не делает конфиг невалидным"""
        config = UpdateConfig(release_dir=str(tmp_path / "missing"))

        assert config.is_valid() is True
