"""
Update Server Provider - HTTP сервер обновлений
"""

import logging
from datetime import datetime
from typing import Dict, Any
from urllib.parse import quote
from aiohttp import web, web_request, web_response

from ..errors import (
    UpdateError,
    NotFoundError,
    ParseError,
    ManifestUnavailableError,
    PlatformError,
    TransferError,
)

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = 'GET, POST, OPTIONS'
CORS_ALLOW_HEADERS = 'Content-Type, User-Agent'


def content_disposition(filename: str) -> str:
    """attachment с экранированным именем и filename* (RFC 6266 / RFC 5987)"""
    fallback = ''.join(c if c.isprintable() and c.isascii() else '_' for c in filename)
    fallback = fallback.replace('\\', '\\\\').replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class UpdateServerProvider:
    """Провайдер HTTP сервера обновлений"""

    def __init__(self, config, manifest_provider, artifact_provider, version_provider):
        self.config = config
        self.manifest_provider = manifest_provider
        self.artifact_provider = artifact_provider
        self.version_provider = version_provider

        self.app = None
        self.runner = None
        self.site = None
        self.is_running = False

    async def initialize(self) -> bool:
        """Инициализация провайдера"""
        try:
            logger.info("🔧 Инициализация UpdateServerProvider...")
            self.app = await self.create_app()
            return True
        except Exception as e:
            logger.error(f"❌ Ошибка инициализации UpdateServerProvider: {e}")
            return False

    async def create_app(self) -> web.Application:
        """Создание aiohttp приложения"""
        middlewares = []
        if self.config.cors_enabled:
            middlewares.append(self.cors_middleware)
        middlewares.append(self.error_middleware)

        app = web.Application(middlewares=middlewares)

        # Routes
        app.router.add_get('/latest-mac.yml', self.manifest_handler)
        app.router.add_get('/update/{platform}/{version}', self.update_handler)
        app.router.add_get('/download/{file}', self.download_handler)
        app.router.add_get('/health', self.health_handler)
        app.router.add_get('/', self.index_handler)

        return app

    def _apply_cors_headers(self, request: web_request.Request, response):
        origin = request.headers.get('Origin')
        if origin:
            # Отражаем Origin: с credentials браузер не принимает "*"
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers.add('Vary', 'Origin')
        else:
            response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Credentials'] = 'true'
        response.headers['Access-Control-Allow-Methods'] = CORS_ALLOW_METHODS
        response.headers['Access-Control-Allow-Headers'] = CORS_ALLOW_HEADERS

    @web.middleware
    async def cors_middleware(self, request: web_request.Request, handler) -> web_response.StreamResponse:
        if request.method == 'OPTIONS':
            response = web.Response(status=204)
            self._apply_cors_headers(request, response)
            return response

        try:
            response = await handler(request)
        except web.HTTPException as exc:
            self._apply_cors_headers(request, exc)
            raise

        # Потоковый ответ уже отправил заголовки
        if not response.prepared:
            self._apply_cors_headers(request, response)
        return response

    @web.middleware
    async def error_middleware(self, request: web_request.Request, handler) -> web_response.StreamResponse:
        """Любая неперехваченная ошибка -> JSON 500 вместо обрыва соединения"""
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except Exception:
            logger.exception(f"❌ Ошибка сервера при обработке {request.method} {request.path}")
            return web.json_response({"error": UpdateError.public_message}, status=500)

    async def manifest_handler(self, request: web_request.Request) -> web_response.Response:
        """Отдача latest-mac.yml как есть"""
        if self.config.log_requests:
            logger.info(f"📄 Запрос yml файла: {self.manifest_provider.manifest_path}")

        try:
            raw = self.manifest_provider.read_raw()
            manifest = self.manifest_provider.parse(raw)
        except NotFoundError as e:
            logger.error(f"❌ yml файл не найден: {e}")
            return web.Response(text=e.public_message, status=e.status, content_type='text/plain')
        except ParseError as e:
            logger.error(f"❌ Ошибка чтения/разбора yml файла: {e}")
            return web.Response(text=e.public_message, status=e.status, content_type='text/plain')

        logger.info(f"📄 Текущая версия в yml: {self.manifest_provider.describe(manifest)}")

        return web.Response(
            body=raw,
            content_type='text/yaml',
            headers={
                'Cache-Control': self.config.cache_control,
                'Pragma': 'no-cache',
                'Expires': '0'
            }
        )

    async def update_handler(self, request: web_request.Request) -> web_response.Response:
        """Проверка версии клиента: 204 / 200 + манифест / 400 / 500"""
        platform = request.match_info['platform']
        version = request.match_info['version']

        if self.config.log_requests:
            logger.info(f"🔍 Проверка обновления: platform={platform}, version={version}")

        try:
            result = self.version_provider.check_update(platform, version)
        except PlatformError as e:
            return web.json_response({"error": e.client_message}, status=e.status)
        except ManifestUnavailableError as e:
            logger.error(f"❌ Ошибка обработки информации об обновлении: {e}")
            return web.json_response({"error": e.public_message}, status=e.status)

        if not result.needs_update:
            return web.Response(status=204)

        return web.json_response(result.manifest.to_dict())

    async def download_handler(self, request: web_request.Request) -> web_response.StreamResponse:
        """Потоковая отдача артефакта"""
        filename = request.match_info['file']

        try:
            artifact = self.artifact_provider.open_artifact(filename)
        except (NotFoundError, TransferError) as e:
            return web.Response(text=e.public_message, status=e.status, content_type='text/plain')

        with artifact:
            response = web.StreamResponse(
                headers={
                    'Content-Type': 'application/octet-stream',
                    'Content-Disposition': content_disposition(artifact.filename)
                }
            )
            response.content_length = artifact.size
            if self.config.cors_enabled:
                self._apply_cors_headers(request, response)

            if self.config.log_downloads:
                logger.info(f"📥 Начало передачи файла: {artifact.filename} ({artifact.size} байт)")

            await response.prepare(request)

            try:
                async for chunk in artifact.iter_chunks():
                    await response.write(chunk)
            except (TransferError, ConnectionResetError) as e:
                # Статус 200 уже отправлен, остаётся только оборвать передачу
                logger.error(f"❌ Передача файла {artifact.filename} прервана: {e}")
                if request.transport is not None:
                    request.transport.close()
                return response

            await response.write_eof()

        if self.config.log_downloads:
            logger.info(f"✅ Передача файла завершена: {artifact.filename}")
        return response

    async def health_handler(self, request: web_request.Request) -> web_response.Response:
        """Проверка здоровья сервера"""
        latest_version = None
        try:
            latest_version = self.manifest_provider.load_manifest().version
        except UpdateError as e:
            logger.warning(f"⚠️ Health check: манифест недоступен: {e}")

        artifact_status = self.artifact_provider.get_status(self.config.manifest_filename)

        return web.json_response({
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "release_dir": str(self.config.release_path),
            "release_dir_exists": self.config.release_path.is_dir(),
            "manifest_exists": self.manifest_provider.exists(),
            "latest_version": latest_version,
            "artifacts_available": artifact_status["artifacts_count"]
        })

    async def index_handler(self, request: web_request.Request) -> web_response.Response:
        """Проверка живости"""
        return web.Response(text="Hello World", content_type='text/plain')

    async def start_server(self) -> bool:
        """Запуск HTTP сервера"""
        try:
            if self.is_running:
                logger.warning("⚠️ Сервер уже запущен")
                return True

            if not self.app:
                logger.error("❌ Приложение не инициализировано")
                return False

            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            self.site = web.TCPSite(self.runner, self.config.host, self.config.port)
            await self.site.start()

            self.is_running = True

            logger.info("=" * 60)
            logger.info(f"🔄 Сервер обновлений запущен на порту {self.config.port}")
            logger.info(f"📡 Manifest: http://{self.config.host}:{self.config.port}/latest-mac.yml")
            logger.info(f"🔍 Update: http://{self.config.host}:{self.config.port}/update/{{platform}}/{{version}}")
            logger.info(f"📁 Downloads: http://{self.config.host}:{self.config.port}/download/{{file}}")
            logger.info("=" * 60)

            return True

        except OSError as e:
            logger.error(f"❌ Ошибка запуска сервера: {e}")
            return False

    async def stop_server(self) -> bool:
        """Остановка HTTP сервера"""
        if not self.is_running:
            logger.info("ℹ️ Сервер уже остановлен")
            return True

        if self.site:
            await self.site.stop()
        if self.runner:
            await self.runner.cleanup()

        self.is_running = False
        logger.info("✅ Сервер обновлений остановлен")
        return True

    def get_status(self) -> Dict[str, Any]:
        """Получение статуса провайдера"""
        base_url = f"http://{self.config.host}:{self.config.port}"
        return {
            "status": "running" if self.is_running else "stopped",
            "provider": "update_server",
            "host": self.config.host,
            "port": self.config.port,
            "endpoints": {
                "manifest": f"{base_url}/latest-mac.yml",
                "update": f"{base_url}/update/{{platform}}/{{version}}",
                "download": f"{base_url}/download/{{file}}",
                "health": f"{base_url}/health"
            }
        }
