from typing import List, Optional
from sqlalchemy.orm import Session
from cashdrawer.models import User, Role, Store

def get_user(db: Session, user_id: int) -> Optional[User]:
    """Busca un usuario activo por id."""
    return db.query(User).filter(User.id == user_id, User.is_active == True).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Busca un usuario activo por su username."""
    return db.query(User).filter(User.username == username, User.is_active == True).first()

def get_store(db: Session, store_id: int) -> Optional[Store]:
    return db.query(Store).filter(Store.id == store_id, Store.is_active == True).first()

def list_store_managers(db: Session, store_id: int, exclude_id: Optional[int] = None) -> List[User]:
    query = db.query(User).filter(
        User.role == Role.MANAGER,
        User.store_id == store_id,
        User.is_active == True,
    )
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.order_by(User.full_name, User.id).all()

def list_admins(db: Session, exclude_id: Optional[int] = None) -> List[User]:
    query = db.query(User).filter(User.role == Role.ADMIN, User.is_active == True)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.order_by(User.full_name, User.id).all()
