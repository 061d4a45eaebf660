"""
Normalized grammar model types.

This module contains the model every downstream generator consumes:
interfaces (records with typed properties) and type aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

UNKNOWN_TYPE = "unknown"

PRIMITIVE_TYPES = frozenset({"string", "number", "boolean", "bigint", "Date"})


class Property(BaseModel):
    """
    A single typed property of an interface.

    Attributes:
        name: Feature name
        type: Primitive name, interface/rule name, rendered union, or "unknown"
        optional: Property may be absent
        array: Property holds a list of values
        reference: Property is a cross-reference to another element rather than
            a contained value

    Examples:
        - name=ID:            Property(name="name", type="string")
        - target=[State:ID]:  Property(name="target", type="State", reference=True)
        - states+=State*:     Property(name="states", type="State", array=True)
    """

    name: str
    type: str
    optional: bool = False
    array: bool = False
    reference: bool = False

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def is_unknown(self) -> bool:
        return self.type == UNKNOWN_TYPE

    @property
    def is_primitive(self) -> bool:
        return self.type in PRIMITIVE_TYPES


class Interface(BaseModel):
    """
    A named record type, either declared explicitly or implied by a parser rule.

    Attributes:
        name: Interface name
        properties: Properties in declaration order, unique by name
        super_types: Raw names of extended interfaces (not resolved)
    """

    name: str
    properties: tuple[Property, ...] = ()
    super_types: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def get_property(self, name: str) -> Property | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


class TypeAlias(BaseModel):
    """
    A named type expression.

    Attributes:
        name: Alias name
        definition: Rendered type expression, e.g. "'a' | 'b'"
        union_types: Literal values, only for a union made purely of string literals

    Examples:
        - type Shape = 'circle' | 'square':
          TypeAlias(name="Shape", definition="'circle' | 'square'",
                    union_types=("circle", "square"))
        - type Entity = Class | Enum:
          TypeAlias(name="Entity", definition="Class | Enum")
    """

    name: str
    definition: str
    union_types: tuple[str, ...] | None = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def is_string_enum(self) -> bool:
        return self.union_types is not None


class ParsedGrammar(BaseModel):
    """
    Complete normalized grammar.

    This is the root of the model tree handed to template renderers,
    linters, documentation and test generators.

    Attributes:
        project_name: Sanitized identifier derived from the source name
        interfaces: Interfaces in source declaration order
        types: Type aliases in source declaration order
    """

    project_name: str
    interfaces: tuple[Interface, ...] = ()
    types: tuple[TypeAlias, ...] = ()

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def get_interface(self, name: str) -> Interface | None:
        """Get interface by name."""
        for interface in self.interfaces:
            if interface.name == name:
                return interface
        return None

    def get_type(self, name: str) -> TypeAlias | None:
        """Get type alias by name."""
        for type_alias in self.types:
            if type_alias.name == name:
                return type_alias
        return None

    def unknown_properties(self) -> list[tuple[Interface, Property]]:
        """Properties whose type could not be classified."""
        return [
            (interface, prop)
            for interface in self.interfaces
            for prop in interface.properties
            if prop.is_unknown
        ]
