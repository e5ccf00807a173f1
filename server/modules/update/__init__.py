"""
Update Module - сервер обновлений приложения

Модуль предоставляет:
- Отдачу манифеста релиза (latest-mac.yml)
- Проверку версии клиента и переписанный манифест для darwin
- Потоковую отдачу файлов релиза (DMG/ZIP) из release директории
"""

from .core.update_manager import UpdateManager
from .config import UpdateConfig

__all__ = ['UpdateManager', 'UpdateConfig']
__version__ = '1.0.0'
