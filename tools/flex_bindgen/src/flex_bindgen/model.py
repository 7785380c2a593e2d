from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from .common import BindgenError
from .config import GeneratorConfig
from .metadata import NativeEnumConstant, NativeFunction, NativeSignatures, Signature

INTERNAL_TYPE_PREFIXES = ("IntPtr", "Delegate")


class Accessor(enum.Enum):
    GET = "get"
    SET = "set"


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int


@dataclass(frozen=True)
class EnumType:
    name: str
    members: tuple[EnumMember, ...]


@dataclass
class Property:
    member: str
    type_name: str
    accessors: list[Accessor]

    @property
    def name(self) -> str:
        return csharp_name(self.member)

    @property
    def is_enum(self) -> bool:
        return self.type_name[:1].isupper()

    @property
    def has_setter(self) -> bool:
        return Accessor.SET in self.accessors


@dataclass
class BindingModel:
    enums: list[EnumType]
    functions: list[NativeFunction]
    delegates: list[tuple[str, Signature]]
    properties: list[Property]

    @property
    def settable_properties(self) -> list[Property]:
        return [prop for prop in self.properties if prop.has_setter]


def csharp_name(name: str) -> str:
    """``SPACE_BETWEEN`` -> ``SpaceBetween``, ``justify_content`` -> ``JustifyContent``."""
    return re.sub(r"_(.)", lambda match: match.group(1).upper(), name.capitalize())


def group_enums(constants: list[NativeEnumConstant]) -> list[EnumType]:
    groups: dict[str, list[EnumMember]] = {}
    for constant in constants:
        groups.setdefault(csharp_name(constant.group), []).append(
            EnumMember(csharp_name(constant.name), constant.value)
        )
    return [
        EnumType(name, tuple(sorted(members, key=lambda member: member.value)))
        for name, members in sorted(groups.items())
    ]


def match_accessor(function_name: str, prefix: str) -> tuple[str, Accessor] | None:
    match = re.match(rf"^{re.escape(prefix)}(g|s)et_(.+)$", function_name)
    if not match:
        return None
    accessor = Accessor.GET if match.group(1) == "g" else Accessor.SET
    return match.group(2), accessor


def accessor_value_type(function: NativeFunction, accessor: Accessor) -> str:
    if accessor is Accessor.GET:
        return function.return_type.csharp
    # Setters take (item, value).
    if len(function.args) < 2:
        raise BindgenError(f"setter {function.name} has no value argument")
    return function.args[1].csharp


def promote_enum_type(
    member: str,
    type_name: str,
    enum_names: set[str],
    overrides: dict[str, str],
) -> str:
    if type_name != "int":
        return type_name
    enum_type = overrides.get(member) or member.capitalize()
    return enum_type if enum_type in enum_names else type_name


def is_internal_type(type_name: str) -> bool:
    return type_name.startswith(INTERNAL_TYPE_PREFIXES)


def collect_properties(
    functions: list[NativeFunction],
    enum_names: set[str],
    config: GeneratorConfig,
) -> list[Property]:
    # The first accessor seen for a member fixes its type; getters sort first.
    properties: dict[str, Property] = {}
    for function in functions:
        accessor_match = match_accessor(function.name, config.accessor_prefix)
        if accessor_match is None:
            continue
        member, accessor = accessor_match
        type_name = promote_enum_type(
            member,
            accessor_value_type(function, accessor),
            enum_names,
            config.enum_overrides,
        )
        if is_internal_type(type_name):
            continue
        prop = properties.get(member)
        if prop is None:
            prop = properties[member] = Property(member, type_name, [])
        prop.accessors.append(accessor)
    return list(properties.values())


def build_model(signatures: NativeSignatures, config: GeneratorConfig) -> BindingModel:
    enums = group_enums(signatures.constants)
    functions = sorted(signatures.functions, key=lambda function: function.name)
    properties = collect_properties(functions, {item.name for item in enums}, config)
    if not properties:
        raise BindgenError("no properties?")
    return BindingModel(
        enums=enums,
        functions=functions,
        delegates=signatures.delegates.items(),
        properties=properties,
    )
