from pydantic import BaseModel
from typing import List, Optional
from cashdrawer.models import Role

class ValidatorRead(BaseModel):
    # Solo datos públicos: nunca se expone el PIN ni si un id arbitrario lo tiene
    id: int
    full_name: Optional[str] = None
    role: Role
    store_id: Optional[int] = None

    class Config:
        from_attributes = True

class ValidatorList(BaseModel):
    store_id: int
    with_pin: List[ValidatorRead]
    without_pin: List[ValidatorRead]

class ApproverCheckResponse(BaseModel):
    valid: bool = True
    approver: ValidatorRead
