# toolroom/calculators/salary.py
"""
Turkish monthly payroll: gross to net, net to gross and a twelve month summary.

Income tax is cumulative over the year. ``previous_base`` is the tax base
already declared in the earlier months of the year, so a month's tax is
``tax(previous_base + base) - tax(previous_base)``. The month's gross only
moves the current slice, which keeps net salary non-decreasing in gross.
The minimum wage exemption is the same figure computed on the minimum wage
earned every month up to ``month``.
"""
from dataclasses import asdict, dataclass
from decimal import Decimal

from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import money
from toolroom.data.payroll import MONTH_NAMES_TR, PAYROLL_YEARS, SGK_EMPLOYER_INCENTIVE, PayrollYear

ZERO = Decimal("0")
BISECTION_STEPS = 100
BISECTION_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class SalaryResult:
    gross_salary: Decimal
    sgk_worker: Decimal
    unemployment_worker: Decimal
    total_sgk_worker: Decimal
    income_tax_base: Decimal
    income_tax: Decimal
    exemption_amount: Decimal
    stamp_tax: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    sgk_employer: Decimal
    unemployment_employer: Decimal
    total_employer_cost: Decimal
    effective_tax_rate: Decimal

    def rounded(self) -> dict:
        out = {}
        for key, value in asdict(self).items():
            if key == "effective_tax_rate":
                out[key] = value.quantize(Decimal("0.0001"))
            else:
                out[key] = money(value)
        return out


@dataclass(frozen=True)
class AnnualSummary:
    months: list[tuple[str, SalaryResult]]
    total_gross: Decimal
    total_net: Decimal
    total_employer_cost: Decimal
    total_income_tax: Decimal
    total_sgk_worker: Decimal
    total_stamp_tax: Decimal


def get_payroll_year(year: int) -> PayrollYear:
    data = PAYROLL_YEARS.get(year)
    if data is None:
        raise NotFoundError(f"{year} yılı için bordro parametreleri yok")
    return data


def cumulative_income_tax(cumulative: Decimal, data: PayrollYear) -> Decimal:
    tax = ZERO
    remaining = cumulative
    prev_limit = ZERO
    for bracket in data.income_tax_brackets:
        if remaining <= 0:
            break
        size = remaining if bracket.limit.is_infinite() else bracket.limit - prev_limit
        taxable = min(remaining, size)
        tax += taxable * bracket.rate
        remaining -= taxable
        prev_limit = bracket.limit
    return tax


def _slice_tax(base: Decimal, previous_base: Decimal, data: PayrollYear) -> Decimal:
    return cumulative_income_tax(previous_base + base, data) - cumulative_income_tax(previous_base, data)


def _zero_result() -> SalaryResult:
    return SalaryResult(*([ZERO] * 14))


def gross_to_net(
    gross: Decimal,
    month: int = 1,
    year: int = 2025,
    apply_exemption: bool = True,
    sgk_incentive: bool = False,
    previous_base: Decimal = ZERO,
) -> SalaryResult:
    data = get_payroll_year(year)
    gross = Decimal(gross)
    if gross <= 0:
        return _zero_result()
    month = min(max(int(month), 1), 12)

    sgk_base = min(gross, data.sgk_ceiling)
    sgk_worker = sgk_base * data.sgk_worker_rate
    unemployment_worker = sgk_base * data.unemployment_worker_rate
    total_sgk_worker = sgk_worker + unemployment_worker

    income_tax_base = gross - total_sgk_worker
    income_tax = _slice_tax(income_tax_base, max(ZERO, Decimal(previous_base)), data)

    exempt = apply_exemption and data.min_wage_exemption
    exemption = ZERO
    if exempt:
        mw_sgk = min(data.gross_min_wage, data.sgk_ceiling)
        mw_base = data.gross_min_wage - mw_sgk * (data.sgk_worker_rate + data.unemployment_worker_rate)
        exemption = _slice_tax(mw_base, mw_base * (month - 1), data)
    income_tax = max(ZERO, income_tax - exemption)

    stamp_tax = gross * data.stamp_tax_rate
    if exempt:
        stamp_tax = max(ZERO, stamp_tax - data.gross_min_wage * data.stamp_tax_rate)

    total_deductions = total_sgk_worker + income_tax + stamp_tax

    employer_rate = data.sgk_employer_rate - SGK_EMPLOYER_INCENTIVE if sgk_incentive else data.sgk_employer_rate
    sgk_employer = sgk_base * employer_rate
    unemployment_employer = sgk_base * data.unemployment_employer_rate

    return SalaryResult(
        gross_salary=gross,
        sgk_worker=sgk_worker,
        unemployment_worker=unemployment_worker,
        total_sgk_worker=total_sgk_worker,
        income_tax_base=income_tax_base,
        income_tax=income_tax,
        exemption_amount=exemption,
        stamp_tax=stamp_tax,
        total_deductions=total_deductions,
        net_salary=gross - total_deductions,
        sgk_employer=sgk_employer,
        unemployment_employer=unemployment_employer,
        total_employer_cost=gross + sgk_employer + unemployment_employer,
        effective_tax_rate=total_deductions / gross,
    )


def net_to_gross(
    net: Decimal,
    month: int = 1,
    year: int = 2025,
    apply_exemption: bool = True,
    sgk_incentive: bool = False,
    previous_base: Decimal = ZERO,
) -> SalaryResult:
    """Bisection over [net, 3 * net] until the net is within 0.01."""
    target = Decimal(net)
    if target <= 0:
        return _zero_result()

    low, high = target, target * 3
    for _ in range(BISECTION_STEPS):
        mid = (low + high) / 2
        result = gross_to_net(mid, month, year, apply_exemption, sgk_incentive, previous_base)
        if abs(result.net_salary - target) < BISECTION_TOLERANCE:
            return result
        if result.net_salary < target:
            low = mid
        else:
            high = mid
    return gross_to_net((low + high) / 2, month, year, apply_exemption, sgk_incentive, previous_base)


def annual_summary(
    amount: Decimal,
    direction: str = "gross-to-net",
    year: int = 2025,
    apply_exemption: bool = True,
    sgk_incentive: bool = False,
) -> AnnualSummary:
    """The same monthly amount all year; each month carries the tax base declared so far."""
    convert = net_to_gross if direction == "net-to-gross" else gross_to_net
    months = []
    declared = ZERO
    for index, name in enumerate(MONTH_NAMES_TR, start=1):
        result = convert(amount, index, year, apply_exemption, sgk_incentive, declared)
        months.append((name, result))
        declared += result.income_tax_base

    results = [r for _, r in months]
    return AnnualSummary(
        months=months,
        total_gross=sum((r.gross_salary for r in results), ZERO),
        total_net=sum((r.net_salary for r in results), ZERO),
        total_employer_cost=sum((r.total_employer_cost for r in results), ZERO),
        total_income_tax=sum((r.income_tax for r in results), ZERO),
        total_sgk_worker=sum((r.total_sgk_worker for r in results), ZERO),
        total_stamp_tax=sum((r.stamp_tax for r in results), ZERO),
    )
