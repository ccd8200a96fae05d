# toolroom/services/machine_service.py
from sqlalchemy.orm import Session

from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.core.logging import get_logger
from toolroom.data.machine_park import DEFAULT_MACHINES
from toolroom.models import Machine, MachineType

logger = get_logger(__name__)

MACHINE_FIELDS = (
    "code",
    "type",
    "designation",
    "brand",
    "model",
    "year",
    "label",
    "factory",
    "max_diameter_mm",
    "power_kw",
    "max_rpm",
    "taper",
    "has_live_tooling",
    "has_y_axis",
    "has_c_axis",
    "travel_x_mm",
    "travel_y_mm",
    "travel_z_mm",
    "minute_rate",
    "is_active",
    "sort_order",
)


def list_machines(
    db: Session,
    *,
    machine_type: str | None = None,
    include_inactive: bool = False,
) -> list[Machine]:
    q = db.query(Machine)
    if not include_inactive:
        q = q.filter(Machine.is_active.is_(True))
    if machine_type:
        q = q.filter(Machine.type == MachineType(machine_type).value)
    return q.order_by(Machine.sort_order, Machine.code).all()


def machines_by_type(db: Session) -> dict[str, list[Machine]]:
    grouped: dict[str, list[Machine]] = {t.value: [] for t in MachineType}
    for machine in list_machines(db):
        grouped.setdefault(machine.type, []).append(machine)
    return grouped


def get_machine(db: Session, machine_id: int) -> Machine:
    machine = db.get(Machine, machine_id)
    if machine is None:
        raise NotFoundError("Makine bulunamadı.")
    return machine


def _check_code(db: Session, code: str, exclude_id: int | None = None) -> None:
    q = db.query(Machine).filter(Machine.code == code)
    if exclude_id is not None:
        q = q.filter(Machine.id != exclude_id)
    if q.first():
        raise DuplicateError(f"{code} kodlu makine zaten var.")


def create_machine(db: Session, **fields) -> Machine:
    code = fields["code"].strip().upper()
    _check_code(db, code)
    data = {k: v for k, v in fields.items() if k in MACHINE_FIELDS and v is not None}
    data["code"] = code
    data["type"] = MachineType(data["type"]).value
    if "sort_order" not in data:
        data["sort_order"] = db.query(Machine).count()
    machine = Machine(**data)
    db.add(machine)
    db.commit()
    db.refresh(machine)
    logger.info("machine_created", code=machine.code)
    return machine


def update_machine(db: Session, machine_id: int, **fields) -> Machine:
    machine = get_machine(db, machine_id)
    if fields.get("code"):
        fields["code"] = fields["code"].strip().upper()
        _check_code(db, fields["code"], exclude_id=machine.id)
    if fields.get("type"):
        fields["type"] = MachineType(fields["type"]).value
    for key, value in fields.items():
        if key in MACHINE_FIELDS and value is not None:
            setattr(machine, key, value)
    db.add(machine)
    db.commit()
    db.refresh(machine)
    return machine


def deactivate_machine(db: Session, machine_id: int) -> Machine:
    machine = get_machine(db, machine_id)
    machine.is_active = False
    db.add(machine)
    db.commit()
    db.refresh(machine)
    logger.info("machine_deactivated", code=machine.code)
    return machine


def delete_machine(db: Session, machine_id: int) -> None:
    machine = get_machine(db, machine_id)
    db.delete(machine)
    db.commit()


def seed_default_machines(db: Session) -> int:
    """Insert the default park for codes that are not present yet."""
    existing = {code for (code,) in db.query(Machine.code).all()}
    created = 0
    for index, entry in enumerate(DEFAULT_MACHINES):
        if entry["code"] in existing:
            continue
        db.add(Machine(factory="", sort_order=index, is_active=True, **entry))
        created += 1
    db.commit()
    logger.info("machines_seeded", created=created)
    return created
