"""
Artifact Provider - выдача файлов релиза из хранилища
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, AsyncIterator, BinaryIO, Optional

from ..errors import ArtifactNotFoundError, TransferError

logger = logging.getLogger(__name__)


class ArtifactStream:
    """
    Открытый файл артефакта, который читается кусками

    Файл открывается до отправки статуса ответа, поэтому ошибка открытия
    ещё может стать 500. Дескриптор закрывается в close() при любом выходе,
    включая отмену запроса при обрыве соединения клиентом.
    """

    def __init__(self, path: Path, handle: BinaryIO, size: int, chunk_size: int):
        self.path = path
        self.filename = path.name
        self.size = size
        self.chunk_size = chunk_size
        self._handle = handle

    @property
    def closed(self) -> bool:
        return self._handle.closed

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Чтение файла кусками в executor, чтобы не блокировать event loop"""
        loop = asyncio.get_running_loop()
        while True:
            try:
                chunk = await loop.run_in_executor(None, self._handle.read, self.chunk_size)
            except (OSError, ValueError) as e:
                raise TransferError(f"Ошибка чтения {self.filename}: {e}") from e
            if not chunk:
                break
            yield chunk

    def close(self):
        if not self._handle.closed:
            self._handle.close()

    def __enter__(self) -> 'ArtifactStream':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class ArtifactProvider:
    """Провайдер для выдачи артефактов обновлений"""

    def __init__(self, config):
        self.config = config

    @property
    def release_dir(self) -> Path:
        return self.config.release_path

    def resolve_artifact(self, filename: str) -> Path:
        """
        Путь к артефакту строго внутри директории релизов

        Имя приходит от клиента, поэтому разрешены только простые имена
        файлов без разделителей пути. Итоговый путь (после symlink) обязан
        лежать прямо в release_dir.

        Raises:
            ArtifactNotFoundError: файла нет или имя недопустимо
        """
        if (not filename or filename in ('.', '..')
                or '/' in filename or '\\' in filename or '\x00' in filename):
            logger.warning(f"⚠️ Недопустимое имя файла: {filename!r}")
            raise ArtifactNotFoundError(f"Недопустимое имя файла: {filename!r}")

        base_dir = self.release_dir.resolve()
        candidate = (base_dir / filename).resolve()

        if candidate.parent != base_dir:
            logger.warning(f"⚠️ Попытка выхода за пределы release: {filename!r}")
            raise ArtifactNotFoundError(f"Файл вне директории релизов: {filename!r}")

        if not candidate.is_file():
            logger.warning(f"⚠️ Файл не найден: {candidate}")
            logger.info(f"📁 Содержимое release директории: {self.list_artifacts()}")
            raise ArtifactNotFoundError(f"Файл не найден: {filename}")

        return candidate

    def open_artifact(self, filename: str) -> ArtifactStream:
        """
        Открытие артефакта для передачи

        Raises:
            ArtifactNotFoundError: файла нет или имя недопустимо
            TransferError: файл есть, но открыть его не удалось
        """
        path = self.resolve_artifact(filename)

        if self.config.log_downloads:
            logger.info(f"📄 Информация о файле: {self.get_file_info(path)}")

        try:
            handle = open(path, 'rb')
        except OSError as e:
            logger.error(f"❌ Не удалось открыть файл {path}: {e}")
            raise TransferError(f"Не удалось открыть {filename}: {e}") from e

        try:
            size = Path(path).stat().st_size
        except OSError as e:
            handle.close()
            raise TransferError(f"Не удалось прочитать размер {filename}: {e}") from e

        return ArtifactStream(path, handle, size, self.config.chunk_size)

    def get_file_info(self, path: Path) -> Dict[str, Any]:
        """Размер и время изменения файла"""
        try:
            stat = Path(path).stat()
        except OSError as e:
            logger.error(f"❌ Ошибка чтения информации о файле {path}: {e}")
            return {"exists": False, "error": str(e)}

        return {
            "exists": True,
            "filename": Path(path).name,
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime).isoformat()
        }

    def list_artifacts(self) -> List[str]:
        """Список файлов в директории релизов (для диагностики)"""
        try:
            return sorted(p.name for p in self.release_dir.iterdir() if p.is_file())
        except OSError as e:
            logger.error(f"❌ Ошибка чтения директории {self.release_dir}: {e}")
            return []

    def get_status(self, manifest_filename: Optional[str] = None) -> Dict[str, Any]:
        """Получение статуса провайдера"""
        artifacts = self.list_artifacts()
        if manifest_filename:
            artifacts = [name for name in artifacts if name != manifest_filename]

        return {
            "provider": "artifact",
            "release_dir": str(self.release_dir),
            "artifacts_count": len(artifacts)
        }
