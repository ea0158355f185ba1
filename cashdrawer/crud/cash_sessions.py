# cashdrawer/crud/cash_sessions.py
"""
Persistencia de sesiones de caja.

Toda transición es una sola escritura condicional: el INSERT de apertura
depende del índice único parcial, y lock/unlock/close son
``UPDATE ... WHERE id = :id AND status = :esperado``. Si la fila no estaba en
el estado esperado no se toca nada y la función lo indica al llamador.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cashdrawer.models import CashSession, CashSessionStatus, ACTIVE_STATUSES, PaymentMethod

# Columna acumuladora por método de pago
SALES_COLUMNS = {
    PaymentMethod.CASH: CashSession.total_cash_sales,
    PaymentMethod.CARD: CashSession.total_card_sales,
    PaymentMethod.MOBILE: CashSession.total_mobile_sales,
    PaymentMethod.OTHER: CashSession.total_other_sales,
}

def get_session(db: Session, session_id: int) -> Optional[CashSession]:
    return db.query(CashSession).filter(CashSession.id == session_id).first()

def get_active_session(db: Session, store_id: int, cashier_id: int) -> Optional[CashSession]:
    """Sesión abierta o bloqueada del cajero en la tienda, si existe."""
    return db.query(CashSession).filter(
        CashSession.store_id == store_id,
        CashSession.cashier_id == cashier_id,
        CashSession.status.in_(ACTIVE_STATUSES),
    ).first()

def insert_open_session(
    db: Session,
    store_id: int,
    cashier_id: int,
    opening_amount: Decimal,
    notes: Optional[str] = None,
) -> Optional[CashSession]:
    """
    Inserta una sesión abierta. Devuelve None si ya había una activa para
    (tienda, cajero): el índice único parcial rechaza el insert.
    """
    new_session = CashSession(
        store_id=store_id,
        cashier_id=cashier_id,
        status=CashSessionStatus.OPEN,
        opening_amount=opening_amount,
        opening_notes=notes or None,
    )
    db.add(new_session)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None
    db.refresh(new_session)
    return new_session

def transition(
    db: Session,
    session_id: int,
    expected_status: CashSessionStatus,
    values: Dict[str, Any],
    **guards: Any,
) -> bool:
    """
    Compare-and-swap sobre la fila: aplica ``values`` solo si el estado
    actual es ``expected_status`` (y las columnas de ``guards`` tienen el
    valor indicado). Devuelve True si la fila cambió.
    """
    stmt = (
        update(CashSession)
        .where(CashSession.id == session_id, CashSession.status == expected_status)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    for column, value in guards.items():
        stmt = stmt.where(getattr(CashSession, column) == value)

    result = db.execute(stmt)
    if result.rowcount != 1:
        db.rollback()
        return False
    db.commit()
    return True

def record_sale(db: Session, session_id: int, method: str, amount: Decimal) -> bool:
    """
    Suma una venta a los acumulados de una sesión abierta, en el mismo UPDATE
    (``total = total + :monto``), sin leer antes la fila.
    """
    try:
        payment_method = PaymentMethod(method)
    except ValueError:
        payment_method = PaymentMethod.OTHER
    column = SALES_COLUMNS[payment_method]

    stmt = (
        update(CashSession)
        .where(CashSession.id == session_id, CashSession.status == CashSessionStatus.OPEN)
        .values({
            column: column + amount,
            CashSession.transaction_count: CashSession.transaction_count + 1,
        })
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount != 1:
        db.rollback()
        return False
    db.commit()
    return True
