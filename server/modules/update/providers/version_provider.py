"""
Version Provider - решение о необходимости обновления клиента
"""

import logging
import re
from typing import Dict, Any

from ..core.types import FileDescriptor, ReleaseManifest, UpdateQuery, UpdateResult, UpdateStatus
from ..errors import (
    UpdateError,
    ManifestUnavailableError,
    PlatformNotImplementedError,
    UnsupportedPlatformError,
)
from .manifest_provider import url_basename

logger = logging.getLogger(__name__)

PLATFORM_DARWIN = "darwin"
PLATFORM_WIN32 = "win32"


class VersionProvider:
    """Провайдер для сравнения версий и подготовки манифеста клиенту"""

    def __init__(self, config, manifest_provider):
        self.config = config
        self.manifest_provider = manifest_provider
        self.version_prefix = re.compile(r'^v')

    def strip_version_prefix(self, version: str) -> str:
        """ "v1.2.0" -> "1.2.0" (снимается только один ведущий "v") """
        return self.version_prefix.sub('', version, count=1)

    def is_up_to_date(self, client_version: str, latest_version: str) -> bool:
        """
        Клиент актуален, если его версия >= последней

        ВНИМАНИЕ: сравнение строковое (лексикографическое), не semver.
        "9.0.0" >= "10.0.0" даёт True, то есть клиент 9.x считается
        актуальным относительно 10.x. Клиенты уже завязаны на этот порядок,
        поэтому поведение сохранено как известное ограничение.
        """
        return client_version >= latest_version

    def check_update(self, platform: str, client_version: str) -> UpdateResult:
        """
        Проверка обновления для клиента

        Args:
            platform: Платформа клиента (darwin, win32, ...)
            client_version: Текущая версия клиента (допускается префикс "v")

        Returns:
            UpdateResult: UP_TO_DATE или NEEDS_UPDATE с переписанным манифестом

        Raises:
            ManifestUnavailableError: манифест не найден или не разобран
            PlatformNotImplementedError: win32 пока не поддерживается
            UnsupportedPlatformError: неизвестная платформа
        """
        query = UpdateQuery(platform=platform, version=self.strip_version_prefix(client_version))
        self.ensure_platform_supported(query.platform)

        try:
            manifest = self.manifest_provider.load_manifest()
        except UpdateError as e:
            logger.error(f"❌ Манифест недоступен: {e}")
            raise ManifestUnavailableError(str(e)) from e

        if self.is_up_to_date(query.version, manifest.version):
            logger.info(f"✅ Текущая версия не ниже последней: current={query.version}, latest={manifest.version}")
            return UpdateResult(
                status=UpdateStatus.UP_TO_DATE,
                client_version=query.version,
                latest_version=manifest.version
            )

        logger.info(f"🔄 Требуется обновление: current={query.version}, latest={manifest.version}")
        return UpdateResult(
            status=UpdateStatus.NEEDS_UPDATE,
            manifest=self.rewrite_manifest(manifest),
            client_version=query.version,
            latest_version=manifest.version
        )

    def ensure_platform_supported(self, platform: str):
        """
        Платформа проверяется до чтения манифеста: win32 и неизвестные
        платформы получают 400 при любой версии клиента.
        """
        if platform == PLATFORM_DARWIN:
            return

        if platform == PLATFORM_WIN32:
            logger.warning("⚠️ Обновления для Windows ещё не подготовлены")
            raise PlatformNotImplementedError(platform)

        logger.warning(f"⚠️ Неподдерживаемая платформа: {platform}")
        raise UnsupportedPlatformError(platform)

    def rewrite_manifest(self, manifest: ReleaseManifest) -> ReleaseManifest:
        """Новый манифест, в котором файлы отдаются через /download этого сервера"""
        return ReleaseManifest(
            version=manifest.version,
            files=[
                FileDescriptor(
                    url=f"{self.config.download_url_prefix}{url_basename(f.url)}",
                    sha512=f.sha512,
                    size=f.size
                )
                for f in manifest.files
            ],
            release_date=manifest.release_date,
            path=manifest.path,
            sha512=manifest.sha512
        )

    def get_status(self) -> Dict[str, Any]:
        """Получение статуса провайдера"""
        return {
            "provider": "version",
            "comparison": "lexicographic",
            "supported_platforms": [PLATFORM_DARWIN],
            "download_url_prefix": self.config.download_url_prefix
        }
