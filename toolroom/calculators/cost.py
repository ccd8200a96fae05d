# toolroom/calculators/cost.py
from dataclasses import dataclass, field
from decimal import Decimal

from toolroom.core.numbers import money

HUNDRED = Decimal("100")
SIXTY = Decimal("60")


@dataclass
class CostInput:
    labor_rate: Decimal = Decimal("0")  # TL/h
    turning_rate: Decimal = Decimal("0")  # TL/min
    milling_rate: Decimal = Decimal("0")
    five_axis_rate: Decimal = Decimal("0")
    setup_time: Decimal = Decimal("0")  # min
    machining_time: Decimal = Decimal("0")  # min per part
    quantity: int = 0
    tool_cost: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    coating_cost: Decimal = Decimal("0")
    heat_treatment_cost: Decimal = Decimal("0")
    scrap_rate: Decimal = Decimal("0")  # %
    profit_margin: Decimal = Decimal("0")  # %
    # quote labels
    reference_no: str | None = None
    customer: str | None = None
    material: str | None = None
    machines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CostResult:
    machine_cost: Decimal
    total_machining_minutes: Decimal
    total_machining_hours: Decimal
    labor_cost: Decimal
    additional_costs: Decimal
    subtotal: Decimal
    scrap_cost: Decimal
    total_before_profit: Decimal
    profit: Decimal
    grand_total: Decimal
    cost_per_part: Decimal


def calculate_cost(data: CostInput) -> CostResult:
    qty = Decimal(data.quantity)

    machine_cost = (data.turning_rate + data.milling_rate + data.five_axis_rate) * data.machining_time * qty
    minutes = data.setup_time + data.machining_time * qty
    hours = minutes / SIXTY
    labor_cost = hours * data.labor_rate

    additional = data.tool_cost + data.shipping_cost + data.coating_cost + data.heat_treatment_cost
    subtotal = labor_cost + machine_cost + additional
    scrap = subtotal * data.scrap_rate / HUNDRED
    before_profit = subtotal + scrap
    profit = before_profit * data.profit_margin / HUNDRED
    total = before_profit + profit
    per_part = total / qty if qty > 0 else Decimal("0")

    return CostResult(
        machine_cost=money(machine_cost),
        total_machining_minutes=money(minutes),
        total_machining_hours=money(hours),
        labor_cost=money(labor_cost),
        additional_costs=money(additional),
        subtotal=money(subtotal),
        scrap_cost=money(scrap),
        total_before_profit=money(before_profit),
        profit=money(profit),
        grand_total=money(total),
        cost_per_part=money(per_part),
    )
