from __future__ import annotations

from app.models.transaction_process import PROCESS_NONE, PROCESS_PREAUTHORIZE
from app.services.shapes.api import shapes_api
from app.services.shapes.ordering import reorder
from app.utils.result import Result


class ShapeService:
    """Shape reads and writes that depend on the community's transaction processes."""

    def __init__(self, processes: list[dict] | None):
        self.processes = list(processes or [])

    def _process_id(self, online_payments: bool) -> int | None:
        wanted = (PROCESS_PREAUTHORIZE, PROCESS_NONE) if online_payments else (PROCESS_NONE,)
        for kind in wanted:
            for process in self.processes:
                if process.get("process") == kind:
                    return process.get("id")
        return self.processes[0].get("id") if self.processes else None

    def get(self, *, community_id: int, listing_shape_id, locales: list[str]) -> Result:
        def with_locales(shape: dict) -> dict:
            names = shape.get("name") or {}
            return {**shape, "name": {loc: names.get(loc, "") for loc in locales}}

        return shapes_api.get(community_id=community_id, listing_shape_id=listing_shape_id).map(with_locales)

    def create(self, *, community_id: int, default_locale: str, opts: dict) -> Result:
        names = dict(opts.get("name") or {})
        if not names.get(default_locale):
            fallback = next((text for text in names.values() if text), "")
            names[default_locale] = fallback
        data = {
            **opts,
            "name": names,
            "transaction_process_id": self._process_id(bool(opts.get("online_payments"))),
        }
        return shapes_api.create(community_id=community_id, opts=data)

    def update(self, *, community_id: int, listing_shape_id, opts: dict) -> Result:
        data = dict(opts)
        if "online_payments" in opts:
            data["transaction_process_id"] = self._process_id(bool(opts["online_payments"]))
        return shapes_api.update(community_id=community_id, listing_shape_id=listing_shape_id, opts=data)


def reorder_shapes(*, community_id: int, ordered_ids: list[int]) -> list[tuple[int, int]]:
    """Write the priority changes that put the community's shapes in ``ordered_ids`` order.

    Raises ReorderPreconditionError before writing anything when ``ordered_ids``
    is not a permutation of the current shape ids.
    """
    shapes = shapes_api.get(community_id=community_id).maybe() or []
    updates = reorder(shapes, ordered_ids)
    for shape_id, sort_priority in updates:
        shapes_api.update(community_id=community_id, listing_shape_id=shape_id, opts={"sort_priority": sort_priority})
    return updates
