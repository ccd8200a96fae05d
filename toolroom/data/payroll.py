# toolroom/data/payroll.py
"""Turkish payroll parameters (SGK, unemployment, stamp and income tax)."""
from dataclasses import dataclass
from decimal import Decimal

INFINITY = Decimal("Infinity")


@dataclass(frozen=True)
class TaxBracket:
    limit: Decimal  # cumulative yearly base
    rate: Decimal


@dataclass(frozen=True)
class PayrollYear:
    year: int
    gross_min_wage: Decimal
    sgk_ceiling: Decimal  # monthly
    sgk_worker_rate: Decimal
    sgk_employer_rate: Decimal
    unemployment_worker_rate: Decimal
    unemployment_employer_rate: Decimal
    stamp_tax_rate: Decimal
    income_tax_brackets: tuple[TaxBracket, ...]
    min_wage_exemption: bool = True
    estimated: bool = False


# Employer SGK incentive ("5 puan indirim")
SGK_EMPLOYER_INCENTIVE = Decimal("0.05")

PAYROLL_YEARS: dict[int, PayrollYear] = {
    2025: PayrollYear(
        year=2025,
        gross_min_wage=Decimal("22104.67"),
        sgk_ceiling=Decimal("165757.50"),
        sgk_worker_rate=Decimal("0.14"),
        sgk_employer_rate=Decimal("0.205"),
        unemployment_worker_rate=Decimal("0.01"),
        unemployment_employer_rate=Decimal("0.02"),
        stamp_tax_rate=Decimal("0.00759"),
        income_tax_brackets=(
            TaxBracket(Decimal("158000"), Decimal("0.15")),
            TaxBracket(Decimal("330000"), Decimal("0.20")),
            TaxBracket(Decimal("800000"), Decimal("0.27")),
            TaxBracket(Decimal("4300000"), Decimal("0.35")),
            TaxBracket(INFINITY, Decimal("0.40")),
        ),
    ),
    # 2026 figures are estimates until the official tables are published
    2026: PayrollYear(
        year=2026,
        gross_min_wage=Decimal("25000"),
        sgk_ceiling=Decimal("187500"),
        sgk_worker_rate=Decimal("0.14"),
        sgk_employer_rate=Decimal("0.205"),
        unemployment_worker_rate=Decimal("0.01"),
        unemployment_employer_rate=Decimal("0.02"),
        stamp_tax_rate=Decimal("0.00759"),
        income_tax_brackets=(
            TaxBracket(Decimal("180000"), Decimal("0.15")),
            TaxBracket(Decimal("380000"), Decimal("0.20")),
            TaxBracket(Decimal("900000"), Decimal("0.27")),
            TaxBracket(Decimal("4800000"), Decimal("0.35")),
            TaxBracket(INFINITY, Decimal("0.40")),
        ),
        estimated=True,
    ),
}

MONTH_NAMES_TR = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)
