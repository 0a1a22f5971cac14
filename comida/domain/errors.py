"""Domain errors.

Every error carries a Spanish ``user_message`` that the state layer stores in
view state. The technical detail stays in ``str(error)`` / ``__cause__`` for logs.
"""
from typing import Optional


class ComidaError(Exception):
    default_message = "Ha ocurrido un error inesperado."

    def __init__(self, message: str = "", user_message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.user_message = user_message or self.default_message


class AuthFailure(ComidaError):
    default_message = "No se pudo iniciar sesión. Por favor, inténtalo de nuevo."


class StorageUnavailable(ComidaError):
    default_message = "El almacenamiento no está disponible en este momento."


class PersistenceFailure(ComidaError):
    default_message = "No se pudieron guardar los cambios."


class GenerationFormatError(ComidaError):
    default_message = "Se recibió un formato de respuesta no válido. Inténtalo de nuevo."


class GenerationFailure(ComidaError):
    default_message = "No se pudo contactar con el servicio de generación."


class MalformedInput(ComidaError):
    default_message = "El archivo no tiene un formato válido."
