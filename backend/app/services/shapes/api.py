from __future__ import annotations

from app.services.shapes import store
from app.utils.result import Result, error, success


def _not_found(find_opts: dict) -> Result:
    return error(f"Can not find listing shape for {find_opts}")


class ShapesApi:
    def get(self, *, community_id: int, listing_shape_id=None, include_categories: bool = False) -> Result:
        if listing_shape_id is None:
            return success(store.get_all(community_id=community_id, include_categories=include_categories))

        find_opts = {
            "community_id": community_id,
            "listing_shape_id": listing_shape_id,
            "include_categories": include_categories,
        }
        shape = store.get(**find_opts)
        return success(shape) if shape is not None else _not_found(find_opts)

    def create(self, *, community_id: int, opts: dict) -> Result:
        return success(store.create(community_id=community_id, opts=opts))

    def update(self, *, community_id: int, listing_shape_id, opts: dict) -> Result:
        find_opts = {"community_id": community_id, "listing_shape_id": listing_shape_id}
        shape = store.update(opts=opts, **find_opts)
        return success(shape) if shape is not None else _not_found(find_opts)

    def delete(self, *, community_id: int, listing_shape_id) -> Result:
        find_opts = {"community_id": community_id, "listing_shape_id": listing_shape_id}
        shape = store.delete(**find_opts)
        return success(shape) if shape is not None else _not_found(find_opts)


shapes_api = ShapesApi()
