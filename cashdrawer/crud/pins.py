from typing import Iterable, Optional, Set
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from cashdrawer.models import ManagerPin

def get_pin(db: Session, user_id: int) -> Optional[ManagerPin]:
    return db.query(ManagerPin).filter(ManagerPin.user_id == user_id).first()

def upsert_pin(db: Session, user_id: int, pin_hash: str) -> bool:
    """Crea o reemplaza el hash. Devuelve True si el registro ya existía."""
    record = get_pin(db, user_id)
    if record is not None:
        record.pin_hash = pin_hash
        db.commit()
        return True

    db.add(ManagerPin(user_id=user_id, pin_hash=pin_hash))
    try:
        db.commit()
        return False
    except IntegrityError:
        # Otra petición lo creó entre la lectura y el insert: se reemplaza
        db.rollback()
        get_pin(db, user_id).pin_hash = pin_hash
        db.commit()
        return True

def delete_pin(db: Session, user_id: int) -> int:
    deleted = db.query(ManagerPin).filter(ManagerPin.user_id == user_id).delete(
        synchronize_session=False
    )
    db.commit()
    return deleted

def users_with_pin(db: Session, user_ids: Iterable[int]) -> Set[int]:
    """De una lista de ids, cuáles tienen PIN configurado (una sola consulta)."""
    ids = list(user_ids)
    if not ids:
        return set()
    rows = db.query(ManagerPin.user_id).filter(ManagerPin.user_id.in_(ids)).all()
    return {row.user_id for row in rows}
