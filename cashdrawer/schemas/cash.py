# schemas/cash.py
from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime
from cashdrawer.models import CashSessionStatus

class CashSessionOpen(BaseModel):
    store_id: int
    opening_amount: Decimal = Field(ge=0, decimal_places=2)  # Fondo de caja
    notes: Optional[str] = None

class CashSessionLock(BaseModel):
    session_id: int

class CashSessionUnlock(BaseModel):
    session_id: int
    pin: str = Field(min_length=1, max_length=64)
    validator_id: Optional[int] = None  # Gerente/admin que autoriza (modo override)

class CashSessionClose(BaseModel):
    session_id: int
    closing_amount: Decimal = Field(ge=0, decimal_places=2)  # Lo que el cajero contó físicamente
    notes: Optional[str] = None
    # Solo si hay diferencia en el arqueo
    approver_id: Optional[int] = None
    approver_pin: Optional[str] = Field(default=None, max_length=64)

class ApproverPinCheck(BaseModel):
    session_id: int
    approver_id: int
    pin: str

class CashSessionRead(BaseModel):
    id: int
    store_id: int
    cashier_id: int
    status: CashSessionStatus
    opening_amount: Decimal
    opening_notes: Optional[str] = None
    opened_at: Optional[datetime] = None

    total_cash_sales: Decimal = Decimal(0)
    total_card_sales: Decimal = Decimal(0)
    total_mobile_sales: Decimal = Decimal(0)
    total_other_sales: Decimal = Decimal(0)
    transaction_count: int = 0

    locked_at: Optional[datetime] = None
    locked_by: Optional[int] = None

    # Datos de cierre
    closing_amount: Optional[Decimal] = None
    expected_closing_amount: Optional[Decimal] = None
    discrepancy: Optional[Decimal] = None  # Sobrante (+) o faltante (-)
    closing_notes: Optional[str] = None
    closed_at: Optional[datetime] = None
    requires_approval: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ActiveSessionResponse(BaseModel):
    session: Optional[CashSessionRead] = None

class SessionResponse(BaseModel):
    success: bool = True
    session: CashSessionRead

class CloseSummaryRead(BaseModel):
    opening_amount: Decimal
    total_cash_sales: Decimal
    total_card_sales: Decimal
    total_mobile_sales: Decimal
    total_other_sales: Decimal
    transaction_count: int
    expected_closing: Decimal
    actual_closing: Decimal
    discrepancy: Decimal

    class Config:
        from_attributes = True

class CloseResponse(SessionResponse):
    was_approved: bool
    summary: CloseSummaryRead

class ApprovalRequiredResponse(BaseModel):
    detail: str = "Se requiere aprobación de un gerente por diferencia en caja"
    code: str = "approval_required"
    requires_approval: bool = True
    session_id: int
    discrepancy: Decimal
    expected_closing: Decimal
