"""Atlas Caja: ciclo de vida de sesiones de caja (apertura, bloqueo, cierre y arqueo)."""

__version__ = "2.1.0"
