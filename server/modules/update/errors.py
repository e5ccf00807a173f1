"""
Ошибки Update Module

Каждая ошибка знает свой HTTP статус и безопасное сообщение для клиента.
Подробности (пути, трассировки) пишутся только в лог.
"""


class UpdateError(Exception):
    """Базовая ошибка модуля обновлений"""
    status = 500
    public_message = "Update server error"


class NotFoundError(UpdateError):
    """Манифест или артефакт отсутствует"""
    status = 404
    public_message = "Update file not found"


class ManifestNotFoundError(NotFoundError):
    pass


class ArtifactNotFoundError(NotFoundError):
    pass


class ParseError(UpdateError):
    """Манифест не является валидным YAML или не содержит обязательных полей"""
    public_message = "Error reading yml file"


class ManifestParseError(ParseError):
    pass


class ManifestReadError(ParseError):
    """Файл манифеста есть, но прочитать его не удалось (права, ошибка диска)"""


class ManifestUnavailableError(UpdateError):
    """Манифест нельзя загрузить для проверки обновления"""
    public_message = "Unable to process update information"


class PlatformError(UpdateError):
    """Ожидаемая ошибка клиента: платформа не обслуживается"""
    status = 400

    def __init__(self, platform: str, message: str = None):
        self.platform = platform
        super().__init__(message or self.public_message)

    @property
    def client_message(self) -> str:
        return str(self)


class UnsupportedPlatformError(PlatformError):
    public_message = "Unsupported platform"


class PlatformNotImplementedError(PlatformError):
    """Платформа известна, но обновления для неё ещё не готовы (win32)"""
    public_message = "Platform not yet supported: Windows update information is not ready"


class TransferError(UpdateError):
    """Ошибка передачи файла"""
    public_message = "Error sending file"
