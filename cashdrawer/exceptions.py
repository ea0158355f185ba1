"""
Excepciones tipadas del servicio de caja.

Cada error de negocio tiene su clase, un ``code`` legible por máquina y el
``status_code`` HTTP con el que se responde. Los manejadores de ``main.py``
las convierten en JSON; las rutas no construyen respuestas de error a mano.

    CashDrawerError
    +-- ValidationError        400  validation
    +-- AuthorizationError     403  authorization
    +-- NotFoundError          404  not_found
    +-- ConflictError          409  conflict
    +-- CredentialError        401  credential
    |   +-- PinNotConfigured        (reason = not_configured)
    |   +-- InvalidPin              (reason = invalid)
    +-- InternalError          500  internal
"""
from typing import Any, Dict, Optional


class CashDrawerError(Exception):
    code = "error"
    status_code = 500
    default_message = "Error interno"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"detail": self.message, "code": self.code}
        body.update(self.extra)
        return body


class ValidationError(CashDrawerError):
    code = "validation"
    status_code = 400
    default_message = "Datos inválidos"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, **({"field": field} if field else {}))
        self.field = field


class AuthorizationError(CashDrawerError):
    # El mensaje es genérico a propósito: no debe revelar la estructura de la organización
    code = "authorization"
    status_code = 403
    default_message = "No autorizado para esta operación"


class NotFoundError(CashDrawerError):
    code = "not_found"
    status_code = 404
    default_message = "Recurso no encontrado"


class ConflictError(CashDrawerError):
    code = "conflict"
    status_code = 409
    default_message = "La sesión no está en un estado válido para esta operación"

    def __init__(self, message: Optional[str] = None, current_status: Optional[str] = None):
        super().__init__(message, current_status=current_status)
        self.current_status = current_status


class CredentialError(CashDrawerError):
    code = "credential"
    status_code = 401
    reason = "invalid"
    default_message = "PIN inválido"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, reason=self.reason)


class PinNotConfigured(CredentialError):
    reason = "not_configured"
    default_message = "PIN no configurado para este usuario"


class InvalidPin(CredentialError):
    reason = "invalid"
    default_message = "PIN inválido"


class InternalError(CashDrawerError):
    code = "internal"
    status_code = 500
    default_message = "Error interno del servidor"
