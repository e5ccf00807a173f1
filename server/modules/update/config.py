"""
Конфигурация Update Module
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Any
from pathlib import Path


@dataclass
class UpdateConfig:
    """Конфигурация сервера обновлений"""

    # Основные настройки
    host: str = "0.0.0.0"
    port: int = 3000

    # Хранилище релизов (манифест + артефакты кладёт внешний build процесс)
    release_dir: str = "release"
    manifest_filename: str = "latest-mac.yml"

    # Куда клиент пойдёт за файлами из переписанного манифеста
    download_url_prefix: str = "./download/"
    chunk_size: int = 64 * 1024

    # Настройки сервера
    cors_enabled: bool = True
    cache_control: str = "no-cache, no-store, must-revalidate"

    # Логирование
    log_requests: bool = True
    log_downloads: bool = True

    @property
    def release_path(self) -> Path:
        return Path(self.release_dir)

    @property
    def manifest_path(self) -> Path:
        return self.release_path / self.manifest_filename

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'UpdateConfig':
        """Создание конфигурации из словаря"""
        return cls(**config_dict)

    @classmethod
    def from_env(cls) -> 'UpdateConfig':
        """Создание конфигурации из переменных окружения"""
        return cls(
            host=os.getenv('UPDATE_SERVER_HOST', '0.0.0.0'),
            port=int(os.getenv('UPDATE_SERVER_PORT', '3000')),
            release_dir=os.getenv('UPDATE_RELEASE_DIR', 'release'),
            manifest_filename=os.getenv('UPDATE_MANIFEST_FILE', 'latest-mac.yml'),
            download_url_prefix=os.getenv('UPDATE_DOWNLOAD_PREFIX', './download/'),
            chunk_size=int(os.getenv('UPDATE_CHUNK_SIZE', str(64 * 1024))),
            cors_enabled=os.getenv('UPDATE_CORS', 'true').lower() == 'true',
            log_requests=os.getenv('UPDATE_LOG_REQUESTS', 'true').lower() == 'true',
            log_downloads=os.getenv('UPDATE_LOG_DOWNLOADS', 'true').lower() == 'true'
        )

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь"""
        return asdict(self)

    def is_valid(self) -> bool:
        """
        Проверка валидности конфигурации

        Наличие release_dir не проверяется: это делает стартовая
        диагностика, сервер работает и без него (отдаёт 404).
        """
        if not (1 <= self.port <= 65535):
            return False
        if self.chunk_size <= 0:
            return False
        if not self.manifest_filename:
            return False
        return True
