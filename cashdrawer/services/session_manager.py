# cashdrawer/services/session_manager.py
"""
Ciclo de vida de la sesión de caja.

    open ──lock──> locked ──unlock──> open ──close──> closed (terminal)

Cada método recibe el actor autenticado, consulta las reglas de ``policy``
y escribe con una sola operación condicional de ``crud.cash_sessions``.
Las violaciones de reglas de negocio se lanzan como excepciones tipadas;
``close`` devuelve ``ApprovalRequired`` cuando falta la aprobación.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from sqlalchemy.orm import Session

from cashdrawer.crud import cash_sessions as ledger
from cashdrawer.crud import users as user_store
from cashdrawer.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from cashdrawer.models import CashSession, CashSessionStatus
from cashdrawer.services import credential_vault, discrepancy, policy
from cashdrawer.services.validators import resolve_store

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    CashSessionStatus.OPEN: "La sesión está abierta",
    CashSessionStatus.LOCKED: "La sesión está bloqueada",
    CashSessionStatus.CLOSED: "La sesión ya está cerrada",
}


@dataclass
class ApprovalRequired:
    """Hay diferencia en el arqueo y falta la aprobación de un gerente/admin."""
    session_id: int
    discrepancy: Decimal
    expected_closing: Decimal
    closing_amount: Decimal


@dataclass
class CloseSummary:
    opening_amount: Decimal
    total_cash_sales: Decimal
    total_card_sales: Decimal
    total_mobile_sales: Decimal
    total_other_sales: Decimal
    transaction_count: int
    expected_closing: Decimal
    actual_closing: Decimal
    discrepancy: Decimal


@dataclass
class CloseResult:
    session: CashSession
    summary: CloseSummary
    was_approved: bool = False


CloseOutcome = Union[CloseResult, ApprovalRequired]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_amount(amount, field_name: str) -> Decimal:
    if amount is None:
        raise ValidationError(f"El campo {field_name} es obligatorio", field=field_name)
    try:
        amount = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("El monto no es válido", field=field_name)
    if not amount.is_finite():
        raise ValidationError("El monto no es válido", field=field_name)
    if amount < 0:
        raise ValidationError("El monto no puede ser negativo", field=field_name)
    # Solo centavos exactos; no se redondea
    if amount != amount.quantize(discrepancy.CENTS):
        raise ValidationError("El monto admite como máximo 2 decimales", field=field_name)
    return amount


class SessionLifecycleManager:

    def __init__(self, db: Session):
        self.db = db

    # --- Lecturas ---

    def get_active(self, actor, store_id: Optional[int] = None) -> Optional[CashSession]:
        """Sesión abierta o bloqueada del actor (o None)."""
        target_store = resolve_store(actor, store_id)
        return ledger.get_active_session(self.db, target_store, actor.id)

    def _load(self, session_id: int) -> CashSession:
        session = ledger.get_session(self.db, session_id)
        if session is None:
            raise NotFoundError("Sesión de caja no encontrada")
        return session

    def _require_status(self, session: CashSession, expected: CashSessionStatus) -> None:
        current = CashSessionStatus(session.status)
        if current != expected:
            raise ConflictError(STATUS_MESSAGES[current], current_status=current.value)

    def _lost_race(self, session_id: int, expected: CashSessionStatus) -> ConflictError:
        """La escritura condicional no aplicó: se relee para explicar por qué."""
        self.db.expire_all()
        session = self._load(session_id)
        current = CashSessionStatus(session.status)
        if current == expected:
            # Mismo estado pero cambiaron los acumulados (venta durante el arqueo)
            return ConflictError(
                "Se registraron ventas durante el arqueo. Vuelve a contar la caja.",
                current_status=current.value,
            )
        return ConflictError(STATUS_MESSAGES[current], current_status=current.value)

    # --- Apertura ---

    def open(self, actor, store_id: int, opening_amount, notes: Optional[str] = None) -> CashSession:
        if store_id is None:
            raise ValidationError("La tienda es obligatoria", field="store_id")
        opening_amount = _check_amount(opening_amount, "opening_amount")

        if user_store.get_store(self.db, store_id) is None:
            raise NotFoundError("Tienda no encontrada")
        if not policy.can_open_in_store(actor, store_id):
            raise AuthorizationError("No tienes permiso para abrir caja en esta tienda")

        existing = ledger.get_active_session(self.db, store_id, actor.id)
        if existing is None:
            session = ledger.insert_open_session(self.db, store_id, actor.id, opening_amount, notes)
            if session is not None:
                logger.info(
                    "Caja abierta con fondo %s", opening_amount,
                    extra={"session_id": session.id, "actor_id": actor.id, "store_id": store_id},
                )
                return session
            # Otra petición ganó la carrera entre la consulta y el insert
            existing = ledger.get_active_session(self.db, store_id, actor.id)

        if existing is not None and existing.status == CashSessionStatus.LOCKED:
            raise ConflictError(
                "Tienes una sesión bloqueada. Desbloquéala primero.",
                current_status=CashSessionStatus.LOCKED.value,
            )
        raise ConflictError(
            "Ya tienes una sesión de caja abierta.",
            current_status=CashSessionStatus.OPEN.value,
        )

    # --- Bloqueo ---

    def lock(self, actor, session_id: int) -> CashSession:
        session = self._load(session_id)
        if not policy.can_lock(actor, session):
            raise AuthorizationError("Solo puedes bloquear tus propias sesiones")
        self._require_status(session, CashSessionStatus.OPEN)

        applied = ledger.transition(
            self.db, session_id, CashSessionStatus.OPEN,
            {"status": CashSessionStatus.LOCKED, "locked_at": _now(), "locked_by": actor.id},
        )
        if not applied:
            raise self._lost_race(session_id, CashSessionStatus.OPEN)

        logger.info("Caja bloqueada", extra={"session_id": session_id, "actor_id": actor.id})
        return self._load(session_id)

    # --- Desbloqueo ---

    def unlock(self, actor, session_id: int, pin: str, validator_id: Optional[int] = None) -> CashSession:
        credential_vault.validate_pin_format(pin)
        session = self._load(session_id)

        # Permisos antes que estado
        if validator_id is None:
            # Autodesbloqueo: el dueño con su propio PIN
            if not policy.can_unlock_self(actor, session):
                raise AuthorizationError(
                    "Solo puedes desbloquear tus propias sesiones. Usa la validación de un gerente."
                )
            if not policy.can_hold_pin(actor):
                raise AuthorizationError("Se requiere la validación de un gerente")
            validator = actor
        else:
            if not policy.can_request_override(actor, validator_id):
                raise AuthorizationError("Solo gerentes pueden desbloquear sesiones de otros usuarios")
            validator = user_store.get_user(self.db, validator_id)
            if validator is None:
                raise NotFoundError("Validador no encontrado")
            if not policy.can_act_as_validator(validator, session):
                raise AuthorizationError("El validador no puede autorizar esta sesión")

        self._require_status(session, CashSessionStatus.LOCKED)
        credential_vault.check_pin(self.db, validator.id, pin)

        applied = ledger.transition(
            self.db, session_id, CashSessionStatus.LOCKED,
            {"status": CashSessionStatus.OPEN, "locked_at": None, "locked_by": None},
        )
        if not applied:
            raise self._lost_race(session_id, CashSessionStatus.LOCKED)

        logger.info(
            "Caja desbloqueada",
            extra={"session_id": session_id, "actor_id": actor.id, "validator_id": validator.id},
        )
        return self._load(session_id)

    # --- Aprobación y cierre ---

    def validate_approver(self, actor, session_id: int, approver_id: int, pin: str):
        """Verifica de antemano que el aprobador y su PIN sirven para cerrar esta sesión."""
        credential_vault.validate_pin_format(pin)
        session = self._load(session_id)
        if not policy.can_close(actor, session):
            raise AuthorizationError("Solo puedes cerrar tus propias sesiones")
        return self._authorize_approver(session, approver_id, pin)

    def _authorize_approver(self, session: CashSession, approver_id: int, pin: str):
        approver = user_store.get_user(self.db, approver_id)
        if approver is None:
            raise NotFoundError("Aprobador no encontrado")
        if not policy.can_act_as_validator(approver, session):
            raise AuthorizationError("El aprobador no puede autorizar esta sesión")
        credential_vault.check_pin(self.db, approver.id, pin)
        return approver

    def close(
        self,
        actor,
        session_id: int,
        closing_amount,
        notes: Optional[str] = None,
        approver_id: Optional[int] = None,
        approver_pin: Optional[str] = None,
    ) -> CloseOutcome:
        closing_amount = _check_amount(closing_amount, "closing_amount")
        if approver_pin:
            credential_vault.validate_pin_format(approver_pin)

        session = self._load(session_id)
        if not policy.can_close(actor, session):
            raise AuthorizationError("Solo puedes cerrar tus propias sesiones")
        self._require_status(session, CashSessionStatus.OPEN)

        # Foto de los acumulados con la que se calcula el arqueo
        snapshot_count = session.transaction_count
        expected = discrepancy.compute_expected_closing(session)
        diff = discrepancy.compute_discrepancy(expected, closing_amount)
        needs_approval = discrepancy.requires_approval(diff)

        now = _now()
        values = {
            "status": CashSessionStatus.CLOSED,
            "closing_amount": closing_amount,
            "expected_closing_amount": expected,
            "discrepancy": diff,
            "closing_notes": notes or None,
            "closed_at": now,
            "requires_approval": needs_approval,
            "approved_by": None,
            "approved_at": None,
        }

        if needs_approval:
            if approver_id is None or not approver_pin:
                logger.info(
                    "Arqueo con diferencia %s, se requiere aprobación", diff,
                    extra={"session_id": session_id, "actor_id": actor.id},
                )
                return ApprovalRequired(
                    session_id=session_id,
                    discrepancy=diff,
                    expected_closing=expected,
                    closing_amount=closing_amount,
                )
            approver = self._authorize_approver(session, approver_id, approver_pin)
            values["approved_by"] = approver.id
            values["approved_at"] = now

        applied = ledger.transition(
            self.db, session_id, CashSessionStatus.OPEN, values,
            transaction_count=snapshot_count,
        )
        if not applied:
            raise self._lost_race(session_id, CashSessionStatus.OPEN)

        logger.info(
            "Caja cerrada. Esperado %s, contado %s, diferencia %s", expected, closing_amount, diff,
            extra={"session_id": session_id, "actor_id": actor.id},
        )
        closed = self._load(session_id)
        summary = CloseSummary(
            opening_amount=Decimal(str(closed.opening_amount)),
            total_cash_sales=Decimal(str(closed.total_cash_sales)),
            total_card_sales=Decimal(str(closed.total_card_sales)),
            total_mobile_sales=Decimal(str(closed.total_mobile_sales)),
            total_other_sales=Decimal(str(closed.total_other_sales)),
            transaction_count=closed.transaction_count,
            expected_closing=expected,
            actual_closing=closing_amount,
            discrepancy=diff,
        )
        return CloseResult(session=closed, summary=summary, was_approved=needs_approval)
