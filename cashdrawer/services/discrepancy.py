"""Cálculo del arqueo: efectivo esperado, diferencia y si requiere aprobación."""
from decimal import Decimal

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENTS)


def compute_expected_closing(session) -> Decimal:
    # Solo el efectivo entra al cajón; tarjeta, móvil y otros son informativos
    return _money(session.opening_amount) + _money(session.total_cash_sales)


def compute_discrepancy(expected, actual) -> Decimal:
    """Positivo = sobrante, negativo = faltante."""
    return _money(actual) - _money(expected)


def requires_approval(discrepancy) -> bool:
    # Sin margen de tolerancia: cualquier centavo de diferencia se aprueba
    return _money(discrepancy) != 0
