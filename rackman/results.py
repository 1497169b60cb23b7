"""
Result types returned by the Storage facade.

All immutable; `as_dict()` gives a JSON-friendly shape.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# ══════════════════════════════════════════════════════════════
# PLACEMENT
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Slot:
    """One target coordinate on a rack."""

    rack_id: int
    x: int
    y: int

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PlacementPlan:
    item_id: int
    requested_quantity: int
    allocated_quantity: int
    remaining_quantity: int
    slots: tuple[Slot, ...] = ()
    reserved: bool = False
    reserved_until: datetime | None = None
    reserved_count: int = 0

    def as_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "requested_quantity": self.requested_quantity,
            "allocated_quantity": self.allocated_quantity,
            "remaining_quantity": self.remaining_quantity,
            "slots": [slot.as_dict() for slot in self.slots],
            "reserved": self.reserved,
            "reserved_until": _iso(self.reserved_until),
            "reserved_count": self.reserved_count,
        }


@dataclass(frozen=True)
class PlacementConfirmation:
    item_id: int
    stored_quantity: int
    codes: tuple[str, ...] = ()
    units: tuple = field(default=(), compare=False, repr=False)

    def as_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "stored_quantity": self.stored_quantity,
            "codes": list(self.codes),
        }


# ══════════════════════════════════════════════════════════════
# OUTBOUND
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PickSlot:
    """A storage unit to pick, with where it sits."""

    unit_id: int
    code: str
    rack_id: int
    rack_marker: str
    x: int
    y: int
    created_at: datetime
    expires_at: datetime | None = None

    @classmethod
    def from_unit(cls, unit) -> "PickSlot":
        return cls(
            unit_id=unit.pk,
            code=unit.code,
            rack_id=unit.rack_id,
            rack_marker=unit.rack.marker,
            x=unit.position_x,
            y=unit.position_y,
            created_at=unit.created_at,
            expires_at=unit.expires_at,
        )

    def as_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = _iso(self.created_at)
        data["expires_at"] = _iso(self.expires_at)
        return data


@dataclass(frozen=True)
class OutboundPlan:
    item_id: int
    item_name: str
    requested_quantity: int
    available_quantity: int
    expired_quantity: int
    pick_slots: tuple[PickSlot, ...] = ()
    warning: str | None = None

    def as_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "requested_quantity": self.requested_quantity,
            "available_quantity": self.available_quantity,
            "expired_quantity": self.expired_quantity,
            "pick_slots": [slot.as_dict() for slot in self.pick_slots],
            "warning": self.warning,
        }


@dataclass(frozen=True)
class OutboundCheck:
    code: str
    fifo_compliant: bool
    expired: bool
    requested: PickSlot
    older_slots: tuple[PickSlot, ...] = ()
    warning: str | None = None

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "fifo_compliant": self.fifo_compliant,
            "expired": self.expired,
            "requested": self.requested.as_dict(),
            "older_slots": [slot.as_dict() for slot in self.older_slots],
            "warning": self.warning,
        }


@dataclass(frozen=True)
class OutboundExecution:
    issued_count: int
    operations: tuple = field(default=(), compare=False)

    def as_dict(self) -> dict:
        return {
            "issued_count": self.issued_count,
            "operations": [
                {
                    "id": op.pk,
                    "unit_code": op.unit_code,
                    "rack_id": op.rack_id,
                    "x": op.position_x,
                    "y": op.position_y,
                    "fifo_compliant": op.fifo_compliant,
                    "timestamp": _iso(op.operation_timestamp),
                }
                for op in self.operations
            ],
        }
