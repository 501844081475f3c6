"""
origin_registry.devices.commands

Conversion of an accepted device group submission into a device-creation command.

Responsibilities:
- Aggregate child capacities (kW) into the device capacity in watts.
- Serialize the children and external ids the way the device registry stores them.
- Apply the fixed defaults for newly submitted devices.
"""

from __future__ import annotations

import json
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from origin_registry.db.models import DeviceStatus
from origin_registry.devices.validation import (
    DeviceGroupSubmission,
    DeviceGroupValidator,
    sum_capacity_w,
)

DEFAULT_DEVICE_TYPE = "Solar;Photovoltaic"


@dataclass(frozen=True, slots=True)
class DeviceCreationCommand:
    facility_name: str
    capacity_in_w: int
    device_group: str
    external_device_ids: list[dict[str, str]]
    gps_latitude: str
    gps_longitude: str
    operational_since: int
    device_type: str = DEFAULT_DEVICE_TYPE
    status: DeviceStatus = DeviceStatus.submitted
    images: str = "[]"
    files: str = "[]"
    automatic_post_for_sale: bool = False
    properties: dict[str, Any] = field(
        default_factory=lambda: {
            "address": "",
            "region": "",
            "province": "",
            "gridOperator": "",
            "description": "",
            "otherGreenAttributes": "",
            "typeOfPublicSupport": "",
        }
    )


def build_creation_command(
    submission: DeviceGroupSubmission,
    *,
    external_id_types: Sequence[str] = (),
    operational_since: int | None = None,
) -> DeviceCreationCommand:
    """
    Build the command from a submission that already passed validation.
    The first child's coordinates become the device location.
    """
    children = [child.as_form() for child in submission.children]
    first = children[0]
    external_device_ids = [
        {"id": str(submission.external_device_ids[id_type]), "type": id_type}
        for id_type in external_id_types
        if submission.external_device_ids.get(id_type)
    ]
    return DeviceCreationCommand(
        facility_name=str(submission.facility_name).strip(),
        capacity_in_w=round(sum_capacity_w(submission.children)),
        device_group=json.dumps(children),
        external_device_ids=external_device_ids,
        gps_latitude=str(first["latitude"]),
        gps_longitude=str(first["longitude"]),
        operational_since=operational_since if operational_since is not None else int(time.time()),
    )


def accept_submission(
    validator: DeviceGroupValidator,
    submission: DeviceGroupSubmission,
    *,
    external_id_types: Sequence[str] = (),
    operational_since: int | None = None,
) -> DeviceCreationCommand:
    # Raises `ValidationError` with every collected field error.
    validator.validate(submission).raise_for_errors()
    return build_creation_command(
        submission,
        external_id_types=external_id_types,
        operational_since=operational_since,
    )
