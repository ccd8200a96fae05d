# toolroom/api/reference.py
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from toolroom.data.drilling import DRILL_TYPES, HOLE_TYPES, STANDARD_DRILL_SIZES
from toolroom.data.grinding import COOLANT_TYPES, GRINDING_OPERATIONS, GRINDING_WHEELS, MATERIAL_GRINDING_PARAMS
from toolroom.data.materials import OPERATIONS, TAYLOR_STANDARDS, TOOL_TYPES
from toolroom.data.payroll import PAYROLL_YEARS
from toolroom.data.threading import TAP_TYPES, THREAD_CUTTING_PARAMS, THREAD_STANDARDS
from toolroom.data.tolerance import (
    COMMON_APPLICATIONS,
    COST_FACTORS,
    FIT_TYPES,
    GEOMETRIC_TOLERANCES,
    IT_GRADES,
    IT_TABLE,
    PROCESS_CAPABILITY,
    SURFACE_ROUGHNESS,
)

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/tool-types")
def tool_types():
    return [asdict(t) for t in TOOL_TYPES]


@router.get("/operations")
def operations():
    return [asdict(o) for o in OPERATIONS]


@router.get("/taylor-standards")
def taylor_standards():
    return {key: asdict(s) for key, s in TAYLOR_STANDARDS.items()}


@router.get("/threads/{standard}")
def threads(standard: str):
    table = THREAD_STANDARDS.get(standard)
    if table is None:
        raise HTTPException(status_code=404, detail="Diş standardı bulunamadı.")
    return [asdict(t) for t in table]


@router.get("/threading")
def threading_tables():
    return {
        "standards": list(THREAD_STANDARDS),
        "cutting_params": [asdict(p) for p in THREAD_CUTTING_PARAMS],
        "tap_types": [asdict(t) for t in TAP_TYPES],
    }


@router.get("/grinding")
def grinding_tables():
    return {
        "wheels": [asdict(w) for w in GRINDING_WHEELS],
        "operations": [asdict(o) for o in GRINDING_OPERATIONS],
        "materials": [asdict(m) for m in MATERIAL_GRINDING_PARAMS],
        "coolants": [asdict(c) for c in COOLANT_TYPES],
    }


@router.get("/drilling")
def drilling_tables():
    return {
        "drill_types": [asdict(d) for d in DRILL_TYPES],
        "hole_types": HOLE_TYPES,
        "standard_sizes": list(STANDARD_DRILL_SIZES),
    }


@router.get("/tolerance")
def tolerance_tables():
    return {
        "grades": list(IT_GRADES),
        "it_table": [{"range": r.label, **dict(zip(IT_GRADES, r.values))} for r in IT_TABLE],
        "fits": [asdict(f) for f in FIT_TYPES],
        "surface_roughness": [asdict(s) for s in SURFACE_ROUGHNESS],
        "geometric": [asdict(g) for g in GEOMETRIC_TOLERANCES],
        "process_capability": list(PROCESS_CAPABILITY),
        "cost_factors": list(COST_FACTORS),
        "common_applications": list(COMMON_APPLICATIONS),
    }


@router.get("/payroll/{year}")
def payroll_year(year: int):
    data = PAYROLL_YEARS.get(year)
    if data is None:
        raise HTTPException(status_code=404, detail="Bu yıl için bordro parametreleri yok.")
    out = asdict(data)
    out["income_tax_brackets"] = [
        {"limit": None if b.limit.is_infinite() else b.limit, "rate": b.rate} for b in data.income_tax_brackets
    ]
    return out
