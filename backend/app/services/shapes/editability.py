from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from app.models.transaction_process import PROCESS_PREAUTHORIZE


# Only editable when the community can hold a payment before capturing it.
PREAUTHORIZE_GATED_FIELDS = ("shipping_enabled", "online_payments")
ALWAYS_EDITABLE_FIELDS = ("price_enabled", "units")


@dataclass(frozen=True)
class Capabilities:
    preauthorize_available: bool = False


def capabilities_from_processes(processes: Iterable[dict] | None) -> Capabilities:
    available = any((p or {}).get("process") == PROCESS_PREAUTHORIZE for p in (processes or []))
    return Capabilities(preauthorize_available=available)


def editable_mask(capabilities: Capabilities) -> dict[str, bool]:
    mask = {field: bool(capabilities.preauthorize_available) for field in PREAUTHORIZE_GATED_FIELDS}
    mask.update({field: True for field in ALWAYS_EDITABLE_FIELDS})
    return mask


def uneditable_fields(capabilities: Capabilities) -> dict[str, bool]:
    return {field: not editable for field, editable in editable_mask(capabilities).items()}


def filter_uneditable_fields(shape: dict, capabilities: Capabilities) -> dict:
    locked = {field for field, editable in editable_mask(capabilities).items() if not editable}
    return {key: value for key, value in shape.items() if key not in locked}
