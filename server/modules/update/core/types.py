"""
Типы данных для модуля обновлений
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, List, Dict, Any


class UpdateStatus(Enum):
    """Результат проверки версии клиента"""
    UP_TO_DATE = "up_to_date"        # Клиент актуален (204)
    NEEDS_UPDATE = "needs_update"    # Нужно обновление (200 + манифест)


@dataclass(frozen=True)
class FileDescriptor:
    """Описание файла релиза из манифеста"""
    url: str
    sha512: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "sha512": self.sha512,
            "size": self.size
        }


@dataclass(frozen=True)
class ReleaseManifest:
    """Манифест последнего релиза (latest-mac.yml)"""
    version: str
    files: List[FileDescriptor]
    release_date: Optional[str] = None
    path: Optional[str] = None
    sha512: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Формат ответа клиенту (ключи как в electron-builder)"""
        return {
            "version": self.version,
            "files": [f.to_dict() for f in self.files],
            "path": self.path,
            "sha512": self.sha512,
            "releaseDate": self.release_date
        }


@dataclass(frozen=True)
class UpdateQuery:
    """Запрос клиента на проверку обновления"""
    platform: str
    version: str


@dataclass
class UpdateResult:
    """Результат проверки обновления"""
    status: UpdateStatus
    manifest: Optional[ReleaseManifest] = None
    client_version: str = ""
    latest_version: str = ""

    @property
    def needs_update(self) -> bool:
        return self.status is UpdateStatus.NEEDS_UPDATE
