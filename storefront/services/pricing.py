# storefront/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP

from storefront.domain.errors import InvalidArgument

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_discount(discount) -> Decimal:
    d = Decimal(str(discount if discount is not None else 0))
    if d < 0 or d >= 1:
        raise InvalidArgument(f"Discount must be a fraction in [0, 1), got {d}")
    return d


def line_total(unit_price, discount, quantity: int) -> Decimal:
    """
    Wartosc pozycji: cena * (1 - rabat) * ilosc, zaokraglona do groszy.
    Rabat poza [0, 1) to blad wywolujacego, nie przycinamy go.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidArgument(f"Quantity must be a positive integer, got {quantity!r}")

    price = Decimal(str(unit_price))
    if price < 0:
        raise InvalidArgument(f"Unit price must not be negative, got {price}")

    d = validate_discount(discount)
    if d > 0:
        return to_money(price * (Decimal(1) - d) * quantity)
    return to_money(price * quantity)


def sum_totals(totals) -> Decimal:
    return to_money(sum(totals, ZERO))
