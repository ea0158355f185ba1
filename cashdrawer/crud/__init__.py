# cashdrawer/crud/__init__.py
# Capa de persistencia ("Ledger"): funciones sobre la sesión de SQLAlchemy.
from . import users, cash_sessions, pins
