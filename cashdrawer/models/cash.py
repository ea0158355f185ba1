# cashdrawer/models/cash.py
import enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, ForeignKey, Enum, Boolean, Index, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from cashdrawer.database import Base

class CashSessionStatus(str, enum.Enum):
    OPEN = "open"
    LOCKED = "locked"
    CLOSED = "closed"   # Terminal

ACTIVE_STATUSES = (CashSessionStatus.OPEN, CashSessionStatus.LOCKED)


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    OTHER = "other"


class CashSession(Base):
    __tablename__ = "cash_sessions"
    __table_args__ = (
        # Una sola sesión activa (abierta o bloqueada) por cajero y tienda
        Index(
            "uq_cash_sessions_active_per_cashier",
            "store_id", "cashier_id",
            unique=True,
            sqlite_where=text("status IN ('open', 'locked')"),
            postgresql_where=text("status IN ('open', 'locked')"),
        ),
        Index("ix_cash_sessions_store_cashier_status", "store_id", "cashier_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    cashier_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    status = Column(
        Enum(
            CashSessionStatus,
            name="cash_session_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=CashSessionStatus.OPEN,
        nullable=False,
    )

    # Apertura
    opening_amount = Column(Numeric(12, 2), nullable=False, default=0)  # Fondo de caja
    opening_notes = Column(String, nullable=True)
    opened_at = Column(DateTime(timezone=True), server_default=func.now())

    # Acumulados (los mantiene el flujo de cobro, aquí son solo lectura)
    total_cash_sales = Column(Numeric(12, 2), nullable=False, default=0)
    total_card_sales = Column(Numeric(12, 2), nullable=False, default=0)
    total_mobile_sales = Column(Numeric(12, 2), nullable=False, default=0)
    total_other_sales = Column(Numeric(12, 2), nullable=False, default=0)
    transaction_count = Column(Integer, nullable=False, default=0)

    # Bloqueo temporal
    locked_at = Column(DateTime(timezone=True), nullable=True)
    locked_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Cierre / arqueo
    closing_amount = Column(Numeric(12, 2), nullable=True)           # Contado por el cajero
    expected_closing_amount = Column(Numeric(12, 2), nullable=True)  # Fondo + ventas en efectivo
    discrepancy = Column(Numeric(12, 2), nullable=True)              # Faltante (-) o sobrante (+)
    closing_notes = Column(String, nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # Aprobación de diferencias
    requires_approval = Column(Boolean, nullable=False, default=False)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relaciones
    store = relationship("Store")
    cashier = relationship("User", foreign_keys=[cashier_id])


class ManagerPin(Base):
    """PIN de validación (6 dígitos, bcrypt). Nunca sale en ninguna respuesta."""
    __tablename__ = "manager_pins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    pin_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="pin")
