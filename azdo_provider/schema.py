"""
Resource schema and attribute storage used by the host runtime.

The host runtime owns declarative state. For each resource kind this
package hands it a Resource: a static schema plus the lifecycle
coroutines the runtime awaits, one at a time, with a ResourceData
holding the current attribute values and the resource ID.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from azdo_provider.utils.validate import ValidateFunc


class SchemaType(str, Enum):
    """Attribute value types."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    LIST = "list"


_ZERO_VALUES = {
    SchemaType.STRING: "",
    SchemaType.INT: 0,
    SchemaType.BOOL: False,
}


@dataclass
class Schema:
    """Declarative description of a single attribute."""
    type: SchemaType
    required: bool = False
    optional: bool = False
    default: Any = None
    force_new: bool = False
    validate_func: Optional[ValidateFunc] = None
    description: str = ""
    # Nested block schema for LIST attributes
    elem: Optional[dict[str, "Schema"]] = None
    min_items: int = 0
    max_items: int = 0

    def zero_value(self) -> Any:
        if self.type == SchemaType.LIST:
            return []
        return _ZERO_VALUES[self.type]

    def to_dict(self) -> dict[str, Any]:
        """Describe the attribute as plain data (used by the CLI schema dump)."""
        result: dict[str, Any] = {"type": self.type.value}
        if self.required:
            result["required"] = True
        if self.optional:
            result["optional"] = True
        if self.default is not None:
            result["default"] = self.default
        if self.force_new:
            result["force_new"] = True
        if self.description:
            result["description"] = self.description
        if self.min_items:
            result["min_items"] = self.min_items
        if self.max_items:
            result["max_items"] = self.max_items
        if self.elem is not None:
            result["elem"] = {key: s.to_dict() for key, s in self.elem.items()}
        return result


def apply_defaults(schema: dict[str, Schema], attributes: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of attributes with defaults and zero values filled in."""
    result = {}
    for key, attr_schema in schema.items():
        value = attributes.get(key)
        if value is None:
            if attr_schema.default is not None:
                value = copy.deepcopy(attr_schema.default)
            else:
                value = attr_schema.zero_value()
        elif attr_schema.type == SchemaType.LIST and attr_schema.elem is not None:
            value = [apply_defaults(attr_schema.elem, item or {}) for item in value]
        else:
            value = copy.deepcopy(value)
        result[key] = value
    return result


_PYTHON_TYPES = {
    SchemaType.STRING: (str,),
    SchemaType.INT: (int,),
    SchemaType.BOOL: (bool,),
    SchemaType.LIST: (list, tuple),
}


def validate_attributes(
    schema: dict[str, Schema],
    attributes: dict[str, Any],
    path: str = "",
) -> list[str]:
    """
    Validate raw configuration attributes against a schema.

    Args:
        schema: The resource (or nested block) schema.
        attributes: Attribute values as written in configuration.
        path: Prefix for error messages of nested blocks.

    Returns:
        A list of error messages, empty if the attributes are valid.
    """
    errors = []

    for key in attributes:
        if key not in schema:
            errors.append(f"{path}{key}: unsupported argument")

    for key, attr_schema in schema.items():
        full_key = f"{path}{key}"
        value = attributes.get(key)

        if value is None:
            if attr_schema.required:
                errors.append(f"{full_key}: required field is not set")
            continue

        expected = _PYTHON_TYPES[attr_schema.type]
        if not isinstance(value, expected) or (
            attr_schema.type == SchemaType.INT and isinstance(value, bool)
        ):
            errors.append(f"{full_key}: expected {attr_schema.type.value}")
            continue

        if attr_schema.type == SchemaType.LIST:
            if attr_schema.min_items and len(value) < attr_schema.min_items:
                errors.append(
                    f"{full_key}: attribute supports {attr_schema.min_items} item minimum, config has {len(value)} declared"
                )
            if attr_schema.max_items and len(value) > attr_schema.max_items:
                errors.append(
                    f"{full_key}: attribute supports {attr_schema.max_items} item maximum, config has {len(value)} declared"
                )
            if attr_schema.elem is not None:
                for index, item in enumerate(value):
                    if not isinstance(item, dict):
                        errors.append(f"{full_key}.{index}: expected block")
                        continue
                    errors.extend(
                        validate_attributes(attr_schema.elem, item, f"{full_key}.{index}.")
                    )

        if attr_schema.validate_func is not None:
            errors.extend(attr_schema.validate_func(value, full_key))

    return errors


class ResourceData:
    """Attribute storage for one resource instance."""

    def __init__(
        self,
        schema: dict[str, Schema],
        attributes: Optional[dict[str, Any]] = None,
        id: str = "",
    ):
        self._schema = schema
        self._attributes = apply_defaults(schema, attributes or {})
        self._id = id

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, id: str) -> None:
        """Set the resource ID. An empty ID marks the resource as absent."""
        self._id = id

    def is_new_resource(self) -> bool:
        return self._id == ""

    def get(self, key: str) -> Any:
        if key not in self._schema:
            raise KeyError(f"Unknown attribute: {key}")
        return self._attributes[key]

    def set(self, key: str, value: Any) -> None:
        if key not in self._schema:
            raise KeyError(f"Unknown attribute: {key}")
        attr_schema = self._schema[key]
        if attr_schema.type == SchemaType.LIST and attr_schema.elem is not None:
            value = [apply_defaults(attr_schema.elem, item or {}) for item in value or []]
        elif value is None:
            value = attr_schema.zero_value()
        self._attributes[key] = value

    @property
    def attributes(self) -> dict[str, Any]:
        """A copy of all attribute values."""
        return copy.deepcopy(self._attributes)

    def __repr__(self) -> str:
        return f"<ResourceData(id={self._id!r})>"


LifecycleFunc = Callable[[ResourceData, Any], Awaitable[None]]
ImportStateFunc = Callable[[ResourceData, Any], Awaitable[list[ResourceData]]]


@dataclass
class ResourceImporter:
    state: ImportStateFunc


async def import_state_passthrough(d: ResourceData, meta: Any) -> list[ResourceData]:
    """Importer that uses the external ID as the resource ID unchanged."""
    return [d]


@dataclass
class Resource:
    """A resource kind: its schema and lifecycle operations."""
    create: LifecycleFunc
    read: LifecycleFunc
    update: LifecycleFunc
    delete: LifecycleFunc
    schema: dict[str, Schema] = field(default_factory=dict)
    importer: Optional[ResourceImporter] = None

    def data(self, attributes: Optional[dict[str, Any]] = None, id: str = "") -> ResourceData:
        """Create attribute storage for an instance of this resource."""
        return ResourceData(self.schema, attributes, id)

    def validate(self, attributes: dict[str, Any]) -> list[str]:
        return validate_attributes(self.schema, attributes)
