import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from cashdrawer.database import Base

class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CASHIER = "cashier"

    @property
    def is_supervisor(self) -> bool:
        """Gerentes y administradores pueden validar, aprobar y tener PIN."""
        return self in (Role.ADMIN, Role.MANAGER)


class User(Base):
    """
    Perfil del actor. Este servicio solo lo lee; el alta y el login viven en otro lado.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)

    role = Column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=Role.CASHIER,
        nullable=False,
    )

    is_active = Column(Boolean, default=True)
    # Nulo solo para administradores (alcance global)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    store = relationship("Store", back_populates="users")
    pin = relationship("ManagerPin", back_populates="user", uselist=False, cascade="all, delete-orphan")
