#!/usr/bin/env python3
"""
Сервер обновлений приложения (latest-mac.yml + файлы релиза)
"""

import asyncio
import logging

from dotenv import load_dotenv

from modules.update import UpdateManager, UpdateConfig

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO):
    """Настройка логирования"""
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


async def main():
    """Запуск сервера обновлений до остановки процесса"""
    config = UpdateConfig.from_env()
    manager = UpdateManager(config)

    if not await manager.initialize():
        raise SystemExit(1)
    if not await manager.start():
        raise SystemExit(1)

    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await manager.stop()


def run():
    """Точка входа release-update-server"""
    # Загружаем config.env
    load_dotenv('config.env')
    setup_logging()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Получен сигнал остановки...")


if __name__ == "__main__":
    run()
