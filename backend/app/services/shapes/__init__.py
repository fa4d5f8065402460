from .schema import ShapeSchemaError, build_shape, pick_translation  # noqa: F401
from .validator import validate_shape  # noqa: F401
from .editability import (  # noqa: F401
    Capabilities,
    capabilities_from_processes,
    editable_mask,
    filter_uneditable_fields,
    uneditable_fields,
)
from .ordering import ReorderPreconditionError, diff_by_key, distinguishable_order, reorder  # noqa: F401
from .units import expand_units, parse_units  # noqa: F401
from .form_view import params_to_shape, shape_to_locals  # noqa: F401
from .templates import ShapeTemplates  # noqa: F401
from .api import ShapesApi, shapes_api  # noqa: F401
from .service import ShapeService, reorder_shapes  # noqa: F401
