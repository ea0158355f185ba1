# cashdrawer/routers/cash.py
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from cashdrawer.database import get_db
from cashdrawer.models import User
from cashdrawer.schemas.cash import (
    CashSessionOpen, CashSessionLock, CashSessionUnlock, CashSessionClose,
    ApproverPinCheck, ActiveSessionResponse, SessionResponse, CloseResponse,
    ApprovalRequiredResponse,
)
from cashdrawer.schemas.users import ValidatorList, ApproverCheckResponse
from cashdrawer.security import get_current_user
from cashdrawer.services import validators
from cashdrawer.services.session_manager import SessionLifecycleManager, ApprovalRequired

router = APIRouter()

def get_manager(db: Session = Depends(get_db)) -> SessionLifecycleManager:
    return SessionLifecycleManager(db)

@router.get("/status", response_model=ActiveSessionResponse)
def get_current_session(
    store_id: Optional[int] = None,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    """Devuelve la sesión abierta o bloqueada del usuario, o null si no hay."""
    return {"session": manager.get_active(current_user, store_id)}

@router.post("/open", response_model=SessionResponse)
def open_session(
    session_in: CashSessionOpen,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    session = manager.open(
        current_user, session_in.store_id, session_in.opening_amount, session_in.notes
    )
    return {"success": True, "session": session}

@router.post("/lock", response_model=SessionResponse)
def lock_session(
    lock_in: CashSessionLock,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    """Bloqueo temporal de la caja (el cajero se ausenta)."""
    session = manager.lock(current_user, lock_in.session_id)
    return {"success": True, "session": session}

@router.post("/unlock", response_model=SessionResponse)
def unlock_session(
    unlock_in: CashSessionUnlock,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    """
    Desbloquea con PIN. Sin validator_id se usa el PIN del dueño de la sesión;
    con validator_id, el del gerente/admin indicado.
    """
    session = manager.unlock(
        current_user, unlock_in.session_id, unlock_in.pin, unlock_in.validator_id
    )
    return {"success": True, "session": session}

@router.post(
    "/close",
    response_model=CloseResponse,
    responses={403: {"model": ApprovalRequiredResponse}},
)
def close_session(
    close_data: CashSessionClose,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    outcome = manager.close(
        current_user,
        close_data.session_id,
        close_data.closing_amount,
        notes=close_data.notes,
        approver_id=close_data.approver_id,
        approver_pin=close_data.approver_pin,
    )

    # Diferencia sin aprobación: no se cerró nada, el front pide el PIN del gerente
    if isinstance(outcome, ApprovalRequired):
        body = ApprovalRequiredResponse(
            session_id=outcome.session_id,
            discrepancy=outcome.discrepancy,
            expected_closing=outcome.expected_closing,
        )
        return JSONResponse(status_code=403, content=jsonable_encoder(body))

    return {
        "success": True,
        "session": outcome.session,
        "was_approved": outcome.was_approved,
        "summary": outcome.summary,
    }

@router.post("/validate-pin", response_model=ApproverCheckResponse)
def validate_approver_pin(
    check_in: ApproverPinCheck,
    manager: SessionLifecycleManager = Depends(get_manager),
    current_user: User = Depends(get_current_user)
):
    """Verifica el PIN del aprobador antes de enviar el cierre."""
    approver = manager.validate_approver(
        current_user, check_in.session_id, check_in.approver_id, check_in.pin
    )
    return {"valid": True, "approver": approver}

@router.get("/validators", response_model=ValidatorList)
def list_validators(
    store_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Gerentes de la tienda y administradores que pueden validar, con y sin PIN."""
    return validators.list_candidates(db, current_user, store_id)
