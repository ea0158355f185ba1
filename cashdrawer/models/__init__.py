# cashdrawer/models/__init__.py

# 1. Base de datos (Origen de la clase declarativa)
from cashdrawer.database import Base

# 2. Organización
from .organization import Store

# 3. Usuarios y Roles
from .users import User, Role

# 4. Caja
from .cash import (
    CashSession,
    CashSessionStatus,
    ACTIVE_STATUSES,
    ManagerPin,
    PaymentMethod,
)
