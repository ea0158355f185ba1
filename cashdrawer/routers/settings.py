from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from cashdrawer.database import get_db
from cashdrawer.models import User
from cashdrawer.schemas.pin import PinSet, PinStatus, Ack
from cashdrawer.security import get_current_user
from cashdrawer.services import credential_vault

router = APIRouter()

@router.get("/pin", response_model=PinStatus)
def get_pin_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Indica si el usuario tiene PIN de validación (nunca devuelve el PIN)."""
    return credential_vault.pin_status(db, current_user)

@router.post("/pin", response_model=Ack)
def set_pin(
    pin_in: PinSet,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    existed = credential_vault.set_pin(db, current_user, pin_in.pin)
    message = "PIN actualizado correctamente" if existed else "PIN creado correctamente"
    return {"success": True, "message": message}

@router.delete("/pin", response_model=Ack)
def delete_pin(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    credential_vault.delete_pin(db, current_user)
    return {"success": True, "message": "PIN eliminado correctamente"}
