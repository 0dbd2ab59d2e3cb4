"""
Типизированные ошибки ядра.

Каждая ошибка несёт вид (kind), имя сущности и идентификатор,
чтобы API-слой мог сформировать точный ответ.
"""
from typing import Any, Optional


class BackofficeError(Exception):
    kind = "error"

    def __init__(self, message: str, *, entity: Optional[str] = None, identifier: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.identifier = identifier

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "message": self.message,
            "entity": self.entity,
            "identifier": self.identifier,
        }


class NotFound(BackofficeError):
    kind = "not_found"


class InvalidArgument(BackofficeError):
    kind = "invalid_argument"


class InvalidReference(BackofficeError):
    kind = "invalid_reference"


class Conflict(BackofficeError):
    kind = "conflict"


class Forbidden(BackofficeError):
    kind = "forbidden"
