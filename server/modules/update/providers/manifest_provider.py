"""
Manifest Provider - чтение манифеста релиза (latest-mac.yml)
"""

import logging
from datetime import date, datetime, timezone
from pathlib import PurePosixPath
from typing import Dict, Any, Optional
from urllib.parse import urlsplit

import yaml

from ..core.types import FileDescriptor, ReleaseManifest
from ..errors import ManifestNotFoundError, ManifestParseError, ManifestReadError

logger = logging.getLogger(__name__)


def url_basename(url: str) -> str:
    """Имя файла из url манифеста ("https://host/a/App-1.2.0.dmg?x=1" -> "App-1.2.0.dmg")"""
    path = urlsplit(url).path if "://" in url else url
    return PurePosixPath(path.replace("\\", "/")).name


class ManifestProvider:
    """Провайдер для чтения манифеста релиза

    Манифест читается с диска при каждом вызове: его подменяет внешний
    процесс релиза, а процесс сервера при этом продолжает работать.
    """

    def __init__(self, config):
        self.config = config

    @property
    def manifest_path(self):
        return self.config.manifest_path

    def exists(self) -> bool:
        return self.manifest_path.is_file()

    def read_raw(self) -> bytes:
        """
        Чтение манифеста как есть

        Raises:
            ManifestNotFoundError: если файла нет
            ManifestReadError: если файл есть, но не читается
        """
        try:
            with open(self.manifest_path, 'rb') as f:
                raw = f.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise ManifestNotFoundError(f"Манифест не найден: {self.manifest_path}") from e
        except OSError as e:
            raise ManifestReadError(f"Не удалось прочитать манифест {self.manifest_path}: {e}") from e

        logger.debug(f"📄 Манифест прочитан: {self.manifest_path} ({len(raw)} байт)")
        return raw

    def parse(self, raw: bytes) -> ReleaseManifest:
        """
        Разбор YAML манифеста

        Args:
            raw: Содержимое файла манифеста

        Returns:
            ReleaseManifest: Разобранный манифест

        Raises:
            ManifestParseError: если YAML невалиден или нет обязательных полей
        """
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ManifestParseError(f"Невалидный YAML: {e}") from e

        if not isinstance(data, dict):
            raise ManifestParseError("Манифест должен быть YAML словарём")

        version = data.get("version")
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            # "version: 1.10" YAML отдаёт числом 1.1, берём текст как в файле
            version = self._scalar_text(raw, "version")
        if not isinstance(version, str) or not version:
            raise ManifestParseError("Отсутствует обязательное поле: version")

        files = data.get("files")
        if not isinstance(files, list) or not files:
            raise ManifestParseError("Поле files должно быть непустым списком")

        return ReleaseManifest(
            version=version,
            files=[self._parse_file(index, entry) for index, entry in enumerate(files)],
            release_date=self._format_release_date(data.get("releaseDate")),
            path=self._optional_str(data, "path"),
            sha512=self._optional_str(data, "sha512")
        )

    def load_manifest(self) -> ReleaseManifest:
        """Загрузка и разбор манифеста (всегда свежее чтение с диска)"""
        return self.parse(self.read_raw())

    def describe(self, manifest: ReleaseManifest) -> Dict[str, Any]:
        """Краткая сводка манифеста для логов"""
        return {
            "version": manifest.version,
            "releaseDate": manifest.release_date,
            "files": [
                {"name": url_basename(f.url), "size": f.size}
                for f in manifest.files
            ]
        }

    def _parse_file(self, index: int, entry: Any) -> FileDescriptor:
        if not isinstance(entry, dict):
            raise ManifestParseError(f"files[{index}] должен быть словарём")

        for field in ("url", "sha512", "size"):
            if field not in entry:
                raise ManifestParseError(f"files[{index}]: отсутствует поле {field}")

        url, sha512, size = entry["url"], entry["sha512"], entry["size"]
        if not isinstance(url, str) or not url:
            raise ManifestParseError(f"files[{index}]: url должен быть строкой")
        if not isinstance(sha512, str):
            raise ManifestParseError(f"files[{index}]: sha512 должен быть строкой")
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ManifestParseError(f"files[{index}]: size должен быть целым числом")

        return FileDescriptor(url=url, sha512=sha512, size=size)

    @staticmethod
    def _scalar_text(raw: bytes, key: str) -> Optional[str]:
        """Исходный текст скаляра верхнего уровня, без преобразования типов"""
        node = yaml.compose(raw, Loader=yaml.SafeLoader)
        for key_node, value_node in node.value:
            if key_node.value == key and isinstance(value_node, yaml.ScalarNode):
                return value_node.value
        return None

    @staticmethod
    def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
        value = data.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ManifestParseError(f"Поле {key} должно быть строкой")
        return value

    @staticmethod
    def _format_release_date(value: Any) -> Optional[str]:
        """releaseDate обратно в формат electron-builder (2024-05-01T10:00:00.000Z)"""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value.isoformat(timespec='milliseconds') + 'Z'
        if isinstance(value, date):
            return value.isoformat()
        raise ManifestParseError("Поле releaseDate должно быть датой или строкой")
