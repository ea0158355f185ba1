"""Directorio de validadores: quién puede aprobar o desbloquear en una tienda."""
from typing import Optional

from sqlalchemy.orm import Session

from cashdrawer.crud import users as user_store
from cashdrawer.exceptions import AuthorizationError, ValidationError
from cashdrawer.services import policy
from cashdrawer.services.credential_vault import PinDirectory


def resolve_store(actor, store_id: Optional[int]) -> int:
    """Tienda a consultar: la pedida (si el actor tiene alcance) o la asignada."""
    if store_id is not None:
        if not policy.can_view_store(actor, store_id):
            raise AuthorizationError("No tienes acceso a esta tienda")
        return store_id
    if actor.store_id is None:
        raise ValidationError("El usuario no está asignado a una tienda", field="store_id")
    return actor.store_id


def list_candidates(db: Session, actor, store_id: Optional[int] = None) -> dict:
    """
    Gerentes de la tienda más todos los admins (sin el propio actor), separados
    en con PIN / sin PIN. La partición se calcula aquí; el cliente nunca
    consulta PIN por id.
    """
    target_store = resolve_store(actor, store_id)

    candidates = user_store.list_store_managers(db, target_store, exclude_id=actor.id)
    candidates += user_store.list_admins(db, exclude_id=actor.id)

    with_pin_ids = PinDirectory(db).configured_among(candidates)

    with_pin = [c for c in candidates if c.id in with_pin_ids]
    without_pin = [c for c in candidates if c.id not in with_pin_ids]
    return {"store_id": target_store, "with_pin": with_pin, "without_pin": without_pin}
