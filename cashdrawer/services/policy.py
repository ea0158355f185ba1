"""
Reglas de autorización de caja.

Funciones puras: reciben el actor (``role``, ``store_id``, ``id``) y la
sesión (``cashier_id``, ``store_id``) y devuelven un booleano. No tocan la BD.
"""
from typing import Optional

from cashdrawer.models import Role


def _role(actor) -> Role:
    return Role(actor.role)


def in_store_scope(actor, store_id: Optional[int]) -> bool:
    """El admin tiene alcance global; los demás solo su tienda asignada."""
    if _role(actor) == Role.ADMIN:
        return True
    return actor.store_id is not None and actor.store_id == store_id


def can_open_in_store(actor, store_id: int) -> bool:
    return in_store_scope(actor, store_id)


def can_view_store(actor, store_id: int) -> bool:
    return in_store_scope(actor, store_id)


def can_lock(actor, session) -> bool:
    # Ni gerentes ni admins bloquean la caja de otro
    return actor.id == session.cashier_id


def can_unlock_self(actor, session) -> bool:
    return actor.id == session.cashier_id


def can_act_as_validator(actor, session) -> bool:
    """Gerente de la misma tienda que la sesión, o cualquier admin."""
    return _role(actor).is_supervisor and in_store_scope(actor, session.store_id)


def can_request_override(actor, validator_id: int) -> bool:
    """Quien pide un desbloqueo con validador: el propio validador o un gerente/admin."""
    return actor.id == validator_id or _role(actor).is_supervisor


def can_close(actor, session) -> bool:
    return actor.id == session.cashier_id or can_act_as_validator(actor, session)


def can_hold_pin(actor) -> bool:
    # Los cajeros nunca tienen PIN de validación
    return _role(actor).is_supervisor
