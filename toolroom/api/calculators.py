# toolroom/api/calculators.py
"""
Calculator endpoints. Numeric fields never fail validation: anything that
is not a finite number is read as 0. ``?save=true`` stores the result in
the calculation history.
"""
from dataclasses import asdict
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from toolroom.api.deps import current_user_id
from toolroom.calculators.afk_price import AfkPriceInput, calculate_afk_price
from toolroom.calculators.cost import CostInput, calculate_cost
from toolroom.calculators.cutting import calculate_cutting
from toolroom.calculators.drilling import calculate_drilling, calculate_reaming
from toolroom.calculators.grinding import calculate_grinding
from toolroom.calculators.salary import annual_summary, gross_to_net, net_to_gross
from toolroom.calculators.threading import calculate_threading
from toolroom.calculators.tolerance import calculate_tolerance
from toolroom.calculators.tool_life import calculate_tool_life, check_taylor_constants, compare_tool_types
from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import LenientDecimal, LenientFloat, LenientInt, money
from toolroom.data.drilling import HOLE_TYPES, find_drill_type
from toolroom.data.grinding import find_grinding_operation, find_wheel
from toolroom.data.materials import DEFAULT_TOOL_KEY, get_operation, get_tool_type
from toolroom.data.threading import find_tap_type
from toolroom.db.deps import get_db
from toolroom.models import CalculationType
from toolroom.services import history_service, material_service
from toolroom.services.export_service import afk_price_pdf, cost_quote_pdf

router = APIRouter(prefix="/calculators", tags=["calculators"])


class CalculationOut(BaseModel):
    result: dict
    record_id: int | None = None


class CuttingIn(BaseModel):
    material: str
    tool: str = DEFAULT_TOOL_KEY
    operation: str = "turning"
    diameter: LenientFloat = 0
    depth: LenientFloat = 0
    notes: str | None = None


class ToolLifeIn(BaseModel):
    material: str
    tool: str = DEFAULT_TOOL_KEY
    cutting_speed: LenientFloat = 0
    workpiece_length: LenientFloat = 0
    parts_per_day: LenientInt = 0
    notes: str | None = None


class ToolCompareIn(BaseModel):
    material: str
    cutting_speed: LenientFloat = 0


class TaylorOverride(BaseModel):
    taylor_c: LenientFloat
    taylor_n: LenientFloat


class TaylorCheckIn(BaseModel):
    overrides: dict[str, TaylorOverride] = Field(default_factory=dict)


class ThreadingIn(BaseModel):
    standard: Literal["metric-coarse", "metric-fine", "unc"] = "metric-coarse"
    designation: str
    material_category: str
    tap_type: str = "spiral-flute"
    hole_depth: LenientFloat = 15
    notes: str | None = None


class DrillingIn(BaseModel):
    material: str
    drill_type: str = "hss"
    diameter: LenientFloat = 0
    depth: LenientFloat = 0
    hole_type: str = "through"
    notes: str | None = None


class ReamingIn(BaseModel):
    material: str
    final_diameter: LenientFloat = 0
    notes: str | None = None


class GrindingIn(BaseModel):
    operation: str = "surface"
    wheel: str = "aluminum-oxide"
    material_category: str
    wheel_diameter: LenientFloat = 300
    wheel_width: LenientFloat = 25
    work_diameter: LenientFloat = 50
    grain_size: LenientInt = 60
    notes: str | None = None


class CostIn(BaseModel):
    labor_rate: LenientDecimal = Decimal("0")
    turning_rate: LenientDecimal = Decimal("0")
    milling_rate: LenientDecimal = Decimal("0")
    five_axis_rate: LenientDecimal = Decimal("0")
    setup_time: LenientDecimal = Decimal("0")
    machining_time: LenientDecimal = Decimal("0")
    quantity: LenientInt = 0
    tool_cost: LenientDecimal = Decimal("0")
    shipping_cost: LenientDecimal = Decimal("0")
    coating_cost: LenientDecimal = Decimal("0")
    heat_treatment_cost: LenientDecimal = Decimal("0")
    scrap_rate: LenientDecimal = Decimal("0")
    profit_margin: LenientDecimal = Decimal("0")
    reference_no: str | None = None
    customer: str | None = None
    material: str | None = None
    machines: list[str] = Field(default_factory=list)
    notes: str | None = None

    def to_input(self) -> CostInput:
        return CostInput(**self.model_dump(exclude={"notes"}))


class SalaryBase(BaseModel):
    amount: LenientDecimal = Decimal("0")
    year: LenientInt = 2025
    apply_exemption: bool = True
    sgk_incentive: bool = False


class SalaryIn(SalaryBase):
    month: LenientInt = 1
    # tax base declared in the earlier months of the year
    previous_base: LenientDecimal = Decimal("0")

    def args(self) -> tuple:
        return (self.month, self.year, self.apply_exemption, self.sgk_incentive, self.previous_base)


class AnnualSalaryIn(SalaryBase):
    direction: Literal["gross-to-net", "net-to-gross"] = "gross-to-net"


class ToleranceIn(BaseModel):
    nominal_size: LenientFloat = 0
    grade: str = "IT7"


class AfkPriceIn(BaseModel):
    material: str
    gross_weight: LenientDecimal = Decimal("0")
    net_weight: LenientDecimal = Decimal("0")
    has_holes: bool = False
    small_holes: LenientInt = 0
    large_holes: LenientInt = 0
    profit_margin: LenientDecimal = Decimal("20")
    quantity: LenientInt = 1


def _material(db: Session, key: str):
    try:
        return material_service.resolve_material(db, key)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


def _tool(key: str):
    tool = get_tool_type(key)
    if tool is None:
        raise HTTPException(status_code=404, detail="Takım tipi bulunamadı.")
    return tool


def _store(
    db: Session,
    request: Request,
    save: bool,
    *,
    calculation_type: CalculationType,
    material: str | None,
    tool: str | None,
    parameters: dict,
    result,
    notes: str | None,
) -> int | None:
    if not save:
        return None
    record = history_service.save_calculation(
        db,
        calculation_type=calculation_type,
        material=material,
        tool=tool,
        parameters=parameters,
        results=result,
        notes=notes,
        user_id=current_user_id(request),
    )
    return record.id


@router.post("/cutting", response_model=CalculationOut)
def cutting(
    payload: CuttingIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    material = _material(db, payload.material)
    tool = _tool(payload.tool)
    operation = get_operation(payload.operation)
    if operation is None:
        raise HTTPException(status_code=404, detail="Operasyon bulunamadı.")

    result = calculate_cutting(material, tool, payload.diameter, payload.depth)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.cutting,
        material=material.name,
        tool=tool.name,
        parameters={"operation": operation.name, "diameter": payload.diameter, "depth": payload.depth},
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/tool-life", response_model=CalculationOut)
def tool_life(
    payload: ToolLifeIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    material = _material(db, payload.material)
    tool = _tool(payload.tool)

    result = calculate_tool_life(
        material,
        tool,
        payload.cutting_speed,
        payload.workpiece_length,
        payload.parts_per_day,
    )
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.toollife,
        material=material.name,
        tool=tool.name,
        parameters={
            "cutting_speed": payload.cutting_speed,
            "workpiece_length": payload.workpiece_length,
            "parts_per_day": payload.parts_per_day,
        },
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/tool-life/compare")
def tool_life_compare(payload: ToolCompareIn, db: Session = Depends(get_db)):
    material = _material(db, payload.material)
    return [asdict(row) for row in compare_tool_types(material, payload.cutting_speed)]


@router.post("/taylor-check")
def taylor_check(payload: TaylorCheckIn):
    overrides = {key: (o.taylor_c, o.taylor_n) for key, o in payload.overrides.items()}
    return [asdict(row) for row in check_taylor_constants(overrides)]


@router.post("/threading", response_model=CalculationOut)
def threading(
    payload: ThreadingIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    try:
        result = calculate_threading(
            payload.standard,
            payload.designation,
            payload.material_category,
            payload.tap_type,
            payload.hole_depth,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)

    tap = find_tap_type(payload.tap_type)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.threading,
        material=payload.material_category,
        tool=tap.name if tap else payload.tap_type,
        parameters={
            "standard": payload.standard,
            "designation": payload.designation,
            "hole_depth": payload.hole_depth,
        },
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/drilling", response_model=CalculationOut)
def drilling(
    payload: DrillingIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    material = _material(db, payload.material)
    drill = find_drill_type(payload.drill_type)
    if drill is None:
        raise HTTPException(status_code=404, detail="Matkap tipi bulunamadı.")
    if payload.hole_type not in HOLE_TYPES:
        raise HTTPException(status_code=400, detail="Delik tipi 'through' veya 'blind' olmalı.")

    result = calculate_drilling(material, drill, payload.diameter, payload.depth, payload.hole_type)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.drilling,
        material=material.name,
        tool=drill.name,
        parameters={
            "mode": "drill",
            "diameter": payload.diameter,
            "depth": payload.depth,
            "hole_type": HOLE_TYPES[payload.hole_type],
        },
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/reaming", response_model=CalculationOut)
def reaming(
    payload: ReamingIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    material = _material(db, payload.material)
    result = calculate_reaming(material, payload.final_diameter)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.drilling,
        material=material.name,
        tool="Rayba",
        parameters={"mode": "ream", "final_diameter": payload.final_diameter},
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/grinding", response_model=CalculationOut)
def grinding(
    payload: GrindingIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    try:
        result = calculate_grinding(
            payload.operation,
            payload.wheel,
            payload.material_category,
            payload.wheel_diameter,
            payload.wheel_width,
            payload.work_diameter,
            payload.grain_size,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)

    wheel = find_wheel(payload.wheel)
    operation = find_grinding_operation(payload.operation)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.grinding,
        material=payload.material_category,
        tool=wheel.name,
        parameters={
            "operation": operation.name,
            "wheel_diameter": payload.wheel_diameter,
            "wheel_width": payload.wheel_width,
            "work_diameter": payload.work_diameter,
            "grain_size": payload.grain_size,
        },
        result=result,
        notes=payload.notes,
    )
    return {"result": asdict(result), "record_id": record_id}


@router.post("/cost", response_model=CalculationOut)
def cost(
    payload: CostIn,
    request: Request,
    save: bool = Query(False),
    db: Session = Depends(get_db),
):
    data = payload.to_input()
    result = calculate_cost(data)
    record_id = _store(
        db,
        request,
        save,
        calculation_type=CalculationType.cost,
        material=payload.material,
        tool=", ".join(payload.machines) or None,
        parameters=payload.model_dump(exclude={"notes", "machines", "material"}, exclude_none=True),
        result=result,
        notes=payload.notes,
    )
    return {"result": history_service.plain_values(result), "record_id": record_id}


@router.post("/cost/quote.pdf")
def cost_quote(payload: CostIn):
    data = payload.to_input()
    pdf = cost_quote_pdf(data, calculate_cost(data))
    filename = f"maliyet_{data.reference_no or 'teklif'}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/salary/gross-to-net")
def salary_gross_to_net(payload: SalaryIn):
    try:
        result = gross_to_net(payload.amount, *payload.args())
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    return result.rounded()


@router.post("/salary/net-to-gross")
def salary_net_to_gross(payload: SalaryIn):
    try:
        result = net_to_gross(payload.amount, *payload.args())
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    return result.rounded()


@router.post("/salary/annual")
def salary_annual(payload: AnnualSalaryIn):
    try:
        summary = annual_summary(
            payload.amount,
            payload.direction,
            payload.year,
            payload.apply_exemption,
            payload.sgk_incentive,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    return {
        "months": [{"month": name, **result.rounded()} for name, result in summary.months],
        "total_gross": money(summary.total_gross),
        "total_net": money(summary.total_net),
        "total_employer_cost": money(summary.total_employer_cost),
        "total_income_tax": money(summary.total_income_tax),
        "total_sgk_worker": money(summary.total_sgk_worker),
        "total_stamp_tax": money(summary.total_stamp_tax),
    }


@router.post("/tolerance")
def tolerance(payload: ToleranceIn):
    try:
        result = calculate_tolerance(payload.nominal_size, payload.grade)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    if result is None:
        raise HTTPException(status_code=400, detail="Ölçü girin (1-500 mm).")
    return asdict(result)


def _afk_input(db: Session, payload: AfkPriceIn):
    try:
        material, price, multiplier = material_service.afk_pricing(db, payload.material)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    data = AfkPriceInput(
        gross_weight=payload.gross_weight,
        net_weight=payload.net_weight,
        price_per_kg=price,
        afk_multiplier=multiplier,
        density=Decimal(str(material.density)),
        has_holes=payload.has_holes,
        small_holes=payload.small_holes,
        large_holes=payload.large_holes,
        profit_margin=payload.profit_margin,
        quantity=payload.quantity,
    )
    return material, data


@router.post("/afk-price")
def afk_price(payload: AfkPriceIn, db: Session = Depends(get_db)):
    material, data = _afk_input(db, payload)
    result = calculate_afk_price(data)
    return {
        "material": material.name,
        "price_per_kg": money(data.price_per_kg),
        "afk_multiplier": data.afk_multiplier,
        "result": history_service.plain_values(result),
    }


@router.post("/afk-price/quote.pdf")
def afk_price_quote(payload: AfkPriceIn, db: Session = Depends(get_db)):
    material, data = _afk_input(db, payload)
    pdf = afk_price_pdf(material.name, data, calculate_afk_price(data))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="afk_fiyat.pdf"'},
    )
