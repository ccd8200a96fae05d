# toolroom/calculators/afk_price.py
"""
Chip-based unit price for contract machining (AFK). The customer pays for
the metal removed, priced per kg and scaled by the material's AFK
multiplier, plus a flat price per drilled hole.
"""
from dataclasses import dataclass
from decimal import Decimal

from toolroom.core.numbers import money, round_decimal

HUNDRED = Decimal("100")
SMALL_HOLE_PRICE = Decimal("1.50")  # EUR each
LARGE_HOLE_PRICE = Decimal("1.00")
GRAMS_PER_KG = Decimal("1000")


@dataclass
class AfkPriceInput:
    gross_weight: Decimal = Decimal("0")  # kg, raw blank
    net_weight: Decimal = Decimal("0")  # kg, finished part
    price_per_kg: Decimal = Decimal("0")  # EUR
    afk_multiplier: Decimal = Decimal("1")
    density: Decimal = Decimal("7.85")  # g/cm3
    has_holes: bool = False
    small_holes: int = 0
    large_holes: int = 0
    profit_margin: Decimal = Decimal("20")  # %
    quantity: int = 1


@dataclass(frozen=True)
class AfkPriceResult:
    chip_weight: Decimal  # kg
    chip_volume: Decimal  # cm3
    effective_price_per_kg: Decimal
    chip_cost: Decimal
    small_hole_cost: Decimal
    large_hole_cost: Decimal
    total_hole_cost: Decimal
    subtotal: Decimal
    profit: Decimal
    unit_total: Decimal
    grand_total: Decimal
    quantity: int


def calculate_afk_price(data: AfkPriceInput) -> AfkPriceResult:
    chip_weight = max(Decimal("0"), data.gross_weight - data.net_weight)
    density = data.density if data.density > 0 else Decimal("0")
    chip_volume = chip_weight * GRAMS_PER_KG / density if density else Decimal("0")

    price = data.price_per_kg * data.afk_multiplier
    chip_cost = chip_weight * price

    small = SMALL_HOLE_PRICE * max(0, data.small_holes) if data.has_holes else Decimal("0")
    large = LARGE_HOLE_PRICE * max(0, data.large_holes) if data.has_holes else Decimal("0")
    holes = small + large

    subtotal = chip_cost + holes
    profit = subtotal * max(Decimal("0"), data.profit_margin) / HUNDRED
    unit_total = subtotal + profit
    quantity = max(1, data.quantity)

    return AfkPriceResult(
        chip_weight=round_decimal(chip_weight, 3),
        chip_volume=money(chip_volume),
        effective_price_per_kg=money(price),
        chip_cost=money(chip_cost),
        small_hole_cost=money(small),
        large_hole_cost=money(large),
        total_hole_cost=money(holes),
        subtotal=money(subtotal),
        profit=money(profit),
        unit_total=money(unit_total),
        grand_total=money(unit_total * quantity),
        quantity=quantity,
    )
