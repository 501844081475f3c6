"""
origin_registry.devices.validation

Device group submission model and validator.

Responsibilities:
- Hold raw form values for a multi-installation device group.
- Validate every child row and every field (no short-circuiting) and collect
  field-scoped errors with form paths such as `children[2].capacity`.
- Enforce the aggregate capacity ceiling across all children.

Numeric fields accept numbers or numeric strings; text fields accept numbers
as their text. Blank input is "missing".
The aggregate capacity error is attached to the last child's capacity path,
not to the row that pushed the total over the limit.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from origin_registry.devices.formatting import PowerFormatter, kw_to_w
from origin_registry.errors import FieldError, ValidationError
from origin_registry.settings import Settings

FormValue = str | int | float | None

MAX_TOTAL_CAPACITY_W = 5_000_000
MIN_CAPACITY_KW = 20
METER_TYPES = ("interval", "scalar")


class _Invalid:
    pass


_MISSING = _Invalid()
_NOT_A_NUMBER = _Invalid()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_number(value: Any) -> float | _Invalid:
    if _is_blank(value):
        return _MISSING
    if isinstance(value, bool):
        return _NOT_A_NUMBER
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return _NOT_A_NUMBER
    else:
        return _NOT_A_NUMBER
    if not math.isfinite(number):
        return _NOT_A_NUMBER
    return number


def as_text(value: Any) -> str | None:
    # Numbers typed into text inputs (meter ids, names) are read as their text.
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _bound(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True, slots=True)
class DeviceGroupChild:
    installation_name: FormValue = ""
    address: FormValue = ""
    city: FormValue = ""
    latitude: FormValue = None
    longitude: FormValue = None
    capacity: FormValue = None  # kW
    meter_id: FormValue = ""
    meter_type: FormValue = ""

    @classmethod
    def from_form(cls, values: Mapping[str, Any]) -> DeviceGroupChild:
        return cls(**{attr: values.get(name) for attr, name in _FORM_NAMES.items()})

    def as_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {}
        for attr, name in _FORM_NAMES.items():
            value = getattr(self, attr)
            if attr in _NUMERIC_ATTRS:
                number = parse_number(value)
                value = None if isinstance(number, _Invalid) else number
            else:
                value = as_text(value)
            form[name] = value
        return form


_FORM_NAMES: dict[str, str] = {
    "installation_name": "installationName",
    "address": "address",
    "city": "city",
    "latitude": "latitude",
    "longitude": "longitude",
    "capacity": "capacity",
    "meter_id": "meterId",
    "meter_type": "meterType",
}
_NUMERIC_ATTRS = frozenset({"latitude", "longitude", "capacity"})


@dataclass(frozen=True, slots=True)
class DeviceGroupSubmission:
    facility_name: FormValue = ""
    children: tuple[DeviceGroupChild, ...] = ()
    external_device_ids: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_form(cls, values: Mapping[str, Any]) -> DeviceGroupSubmission:
        return cls(
            facility_name=values.get("facilityName"),
            children=tuple(DeviceGroupChild.from_form(c) for c in values.get("children") or ()),
            external_device_ids=dict(values.get("externalDeviceIds") or {}),
        )


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: tuple[FieldError, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def by_path(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.path, []).append(error.message)
        return grouped

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def sum_capacity_w(children: Iterable[DeviceGroupChild]) -> float:
    # Rows whose capacity is blank or not a finite number do not contribute.
    total_kw = 0.0
    for child in children:
        capacity = parse_number(child.capacity)
        if not isinstance(capacity, _Invalid):
            total_kw += capacity
    return kw_to_w(total_kw)


def _check_required_string(path: str, label: str, value: Any) -> list[FieldError]:
    if _is_blank(value):
        return [FieldError(path, f"{label} is a required field")]
    if as_text(value) is None:
        return [FieldError(path, f"{label} must be a `string` type")]
    return []


def _check_number(
    path: str,
    label: str,
    value: Any,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
) -> list[FieldError]:
    number = parse_number(value)
    if number is _MISSING:
        return [FieldError(path, f"{label} is a required field")]
    if isinstance(number, _Invalid):
        return [FieldError(path, f"{label} must be a `number` type")]
    errors: list[FieldError] = []
    if minimum is not None and number < minimum:
        errors.append(
            FieldError(path, f"{label} must be greater than or equal to {_bound(minimum)}")
        )
    if maximum is not None and number > maximum:
        errors.append(FieldError(path, f"{label} must be less than or equal to {_bound(maximum)}"))
    return errors


def _check_one_of(path: str, label: str, value: Any, allowed: Sequence[str]) -> list[FieldError]:
    if _is_blank(value):
        return [FieldError(path, f"{label} is a required field")]
    if value not in allowed:
        return [
            FieldError(path, f"{label} must be one of the following values: {', '.join(allowed)}")
        ]
    return []


def validate_child(index: int, child: DeviceGroupChild) -> list[FieldError]:
    p = f"children[{index}]"
    return [
        *_check_required_string(
            f"{p}.installationName", "Installation name", child.installation_name
        ),
        *_check_required_string(f"{p}.address", "Address", child.address),
        *_check_required_string(f"{p}.city", "City", child.city),
        *_check_number(f"{p}.latitude", "Latitude", child.latitude, minimum=-90, maximum=90),
        *_check_number(f"{p}.longitude", "Longitude", child.longitude, minimum=-180, maximum=180),
        *_check_number(f"{p}.capacity", "Capacity", child.capacity, minimum=MIN_CAPACITY_KW),
        *_check_required_string(f"{p}.meterId", "Meter id", child.meter_id),
        *_check_one_of(f"{p}.meterType", "Meter type", child.meter_type, METER_TYPES),
    ]


class DeviceGroupValidator:
    """
    Validates device group submissions.

    Pure and stateless apart from its configuration; `validate` may be called
    concurrently from any number of requests.
    """

    def __init__(
        self,
        *,
        max_total_capacity_w: float = MAX_TOTAL_CAPACITY_W,
        required_external_id_types: Sequence[str] = (),
        formatter: PowerFormatter | None = None,
    ) -> None:
        self._max_total_capacity_w = max_total_capacity_w
        self._required_external_id_types = tuple(required_external_id_types)
        self._formatter = formatter or PowerFormatter()

    @classmethod
    def from_settings(cls, settings: Settings) -> DeviceGroupValidator:
        return cls(
            max_total_capacity_w=settings.max_total_capacity_w,
            required_external_id_types=[
                t.type
                for t in settings.external_device_id_types
                if t.required and not t.autogenerated
            ],
            formatter=PowerFormatter(settings.power_display_unit),
        )

    def validate(self, submission: DeviceGroupSubmission) -> ValidationResult:
        errors: list[FieldError] = []
        errors += _check_required_string("facilityName", "Facility name", submission.facility_name)

        children = submission.children
        if len(children) < 1:
            errors.append(FieldError("children", "children field must have at least 1 items"))

        for index, child in enumerate(children):
            errors += validate_child(index, child)

        if children and sum_capacity_w(children) > self._max_total_capacity_w:
            limit = self._formatter.format(self._max_total_capacity_w, include_unit=True)
            errors.append(
                FieldError(
                    f"children[{len(children) - 1}].capacity",
                    f"Total capacity can be maximum: {limit}",
                )
            )

        for id_type in self._required_external_id_types:
            errors += _check_required_string(
                id_type, id_type, submission.external_device_ids.get(id_type)
            )

        return ValidationResult(errors=tuple(errors))


# --- Module Notes -----------------------------------------------------------
# Error messages follow the wording the registration form already shows, so the
# form layer can render them without translation tables.
