"""
PIN de validación de gerentes y administradores.

El PIN es independiente de la contraseña de login: 6 dígitos, guardado con
bcrypt. Ninguna función de este módulo devuelve el hash.
"""
import logging
import re
from typing import Iterable, Optional, Set

from sqlalchemy.orm import Session

from cashdrawer.crud import pins as pin_store
from cashdrawer.exceptions import (
    AuthorizationError, InvalidPin, PinNotConfigured, ValidationError
)
from cashdrawer.security import dummy_verify, hash_pin, verify_pin_hash
from cashdrawer.services import policy

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"^\d{6}$")


def validate_pin_format(pin: Optional[str]) -> str:
    if not pin or not isinstance(pin, str):
        raise ValidationError("El PIN es obligatorio", field="pin")
    if not PIN_PATTERN.fullmatch(pin):
        raise ValidationError("El PIN debe tener exactamente 6 dígitos", field="pin")
    return pin


def set_pin(db: Session, actor, pin: str) -> bool:
    """Crea o reemplaza el PIN del actor. Devuelve True si ya tenía uno."""
    if not policy.can_hold_pin(actor):
        raise AuthorizationError("Solo gerentes y administradores pueden tener PIN")
    validate_pin_format(pin)
    existed = pin_store.upsert_pin(db, actor.id, hash_pin(pin))
    logger.info("PIN %s", "actualizado" if existed else "creado", extra={"actor_id": actor.id})
    return existed


def pin_status(db: Session, actor) -> dict:
    if not policy.can_hold_pin(actor):
        raise AuthorizationError("Solo gerentes y administradores pueden tener PIN")
    record = pin_store.get_pin(db, actor.id)
    return {
        "has_pin": record is not None,
        "created_at": record.created_at if record else None,
        "updated_at": record.updated_at if record else None,
    }


def has_pin(db: Session, actor_id: int) -> bool:
    return pin_store.get_pin(db, actor_id) is not None


def verify_pin(db: Session, actor_id: int, candidate: str) -> bool:
    """
    True solo si existe PIN y coincide. Sin registro se ejecuta igual una
    verificación bcrypt de relleno para que el tiempo de respuesta no delate
    si el usuario tiene PIN.
    """
    record = pin_store.get_pin(db, actor_id)
    if record is None:
        dummy_verify()
        return False
    return verify_pin_hash(candidate, record.pin_hash)


def check_pin(db: Session, actor_id: int, candidate: str) -> None:
    """Como ``verify_pin`` pero distingue 'no configurado' de 'inválido' con excepciones."""
    record = pin_store.get_pin(db, actor_id)
    if record is None:
        dummy_verify()
        logger.warning("Validación con PIN no configurado", extra={"validator_id": actor_id})
        raise PinNotConfigured()
    if not verify_pin_hash(candidate or "", record.pin_hash):
        logger.warning("PIN inválido", extra={"validator_id": actor_id})
        raise InvalidPin()


def delete_pin(db: Session, actor) -> None:
    # Idempotente: borrar un PIN inexistente no es error
    if pin_store.delete_pin(db, actor.id):
        logger.info("PIN eliminado", extra={"actor_id": actor.id})


class PinDirectory:
    """
    Lectura privilegiada de "quién tiene PIN" sobre varios actores.

    Es la única vía para consultar PIN ajenos y solo la usa el directorio de
    validadores, que ya acotó la lista por rol y tienda. No hay consulta por id
    arbitrario.
    """

    def __init__(self, db: Session):
        self._db = db

    def configured_among(self, candidates: Iterable) -> Set[int]:
        return pin_store.users_with_pin(self._db, [c.id for c in candidates])
