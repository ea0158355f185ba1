from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class PinSet(BaseModel):
    # El formato (6 dígitos) se valida en el servicio para responder 400 con mensaje claro
    pin: str

class PinStatus(BaseModel):
    has_pin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Ack(BaseModel):
    success: bool = True
    message: str
