"""
Update Manager - основной координатор Update Module
"""

import asyncio
import logging
from typing import Dict, Any, Optional

from ..config import UpdateConfig
from ..providers.manifest_provider import ManifestProvider
from ..providers.version_provider import VersionProvider
from ..providers.artifact_provider import ArtifactProvider
from ..providers.update_server_provider import UpdateServerProvider

logger = logging.getLogger(__name__)


class UpdateManager:
    """Основной координатор Update Module"""

    def __init__(self, config: Optional[UpdateConfig] = None):
        self.config = config or UpdateConfig()

        # Провайдеры
        self.manifest_provider = None
        self.version_provider = None
        self.artifact_provider = None
        self.update_server_provider = None

        self.start_time = None
        self.is_initialized = False
        self.is_running = False

    async def initialize(self) -> bool:
        """Инициализация модуля"""
        logger.info("🔧 Инициализация UpdateManager...")

        if not self.config.is_valid():
            logger.error("❌ Неверная конфигурация Update Module")
            return False

        self.manifest_provider = ManifestProvider(self.config)
        self.version_provider = VersionProvider(self.config, self.manifest_provider)
        self.artifact_provider = ArtifactProvider(self.config)
        self.update_server_provider = UpdateServerProvider(
            self.config,
            self.manifest_provider,
            self.artifact_provider,
            self.version_provider
        )
        if not await self.update_server_provider.initialize():
            logger.error("❌ Ошибка инициализации UpdateServerProvider")
            return False

        self.is_initialized = True
        logger.info("✅ UpdateManager инициализирован")
        return True

    def run_startup_check(self) -> Dict[str, Any]:
        """
        Стартовая диагностика хранилища релизов

        Только пишет в лог и возвращает результат, запуск сервера
        от неё не зависит.
        """
        release_dir = self.config.release_path
        exists = release_dir.is_dir()

        logger.info("📁 Проверка release директории при запуске")
        logger.info(f"📁 Путь: {release_dir.resolve()}")
        logger.info(f"📁 Существует: {exists}")

        files = []
        if exists:
            files = self.artifact_provider.list_artifacts()
            logger.info(f"📁 Содержимое: {files}")
        else:
            logger.warning("⚠️ Release директория не найдена, манифест и файлы будут отдавать 404")

        manifest_exists = self.manifest_provider.exists()
        if not manifest_exists:
            logger.warning(f"⚠️ Манифест не найден: {self.config.manifest_path}")

        return {
            "release_dir": str(release_dir),
            "release_dir_exists": exists,
            "files": files,
            "manifest_exists": manifest_exists
        }

    async def start(self) -> bool:
        """Запуск модуля"""
        logger.info("🚀 Запуск UpdateManager...")

        if not self.is_initialized:
            logger.error("❌ Модуль не инициализирован")
            return False

        if self.is_running:
            logger.warning("⚠️ Модуль уже запущен")
            return True

        self.run_startup_check()

        if not await self.update_server_provider.start_server():
            logger.error("❌ Ошибка запуска HTTP сервера")
            return False

        self.is_running = True
        self.start_time = asyncio.get_running_loop().time()

        logger.info("✅ UpdateManager запущен")
        return True

    async def stop(self) -> bool:
        """Остановка модуля"""
        logger.info("🛑 Остановка UpdateManager...")

        if not self.is_running:
            logger.info("ℹ️ Модуль уже остановлен")
            return True

        await self.update_server_provider.stop_server()

        self.is_running = False
        logger.info("✅ UpdateManager остановлен")
        return True

    def get_status(self) -> Dict[str, Any]:
        """Получение статуса модуля"""
        uptime = 0
        if self.start_time:
            uptime = asyncio.get_running_loop().time() - self.start_time

        status = {
            "status": "running" if self.is_running else "stopped",
            "module": "update",
            "initialized": self.is_initialized,
            "uptime_seconds": uptime,
            "providers": {}
        }

        if self.version_provider:
            status["providers"]["version"] = self.version_provider.get_status()
        if self.artifact_provider:
            status["providers"]["artifact"] = self.artifact_provider.get_status(self.config.manifest_filename)
        if self.update_server_provider:
            status["providers"]["update_server"] = self.update_server_provider.get_status()

        return status
