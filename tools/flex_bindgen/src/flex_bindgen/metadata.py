"""Signature model read from a BridgeSupport metadata document.

The document is produced by ``gen_bridge_metadata`` and looks like::

    <signatures version="1.0">
      <enum name="FLEX_ALIGN_AUTO" value="0"/>
      <function name="flex_item_get_align">
        <retval type="i"/>
        <arg type="^{flex_item=}"/>
      </function>
    </signatures>

Function pointer arguments carry ``function_pointer="true"`` and nest their
own ``retval``/``arg`` nodes.

A function or function pointer with more than one ``retval`` node is rejected
rather than treated as returning ``void``; BridgeSupport never emits such a
node, so a document containing one is malformed.
"""

from __future__ import annotations

import enum
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from .common import BindgenError
from .config import GeneratorConfig


class TypeKind(enum.Enum):
    INT = "int"
    FLOAT = "float"
    VOID = "void"
    POINTER = "pointer"
    FUNCTION_POINTER = "function_pointer"
    INVALID = "invalid"


PRIMITIVE_TYPE_MAP = {
    TypeKind.INT: "int",
    TypeKind.FLOAT: "float",
    TypeKind.VOID: "void",
    TypeKind.POINTER: "IntPtr",
}


@dataclass(frozen=True)
class TypeRef:
    kind: TypeKind
    delegate: str | None = None

    @property
    def csharp(self) -> str:
        if self.kind is TypeKind.FUNCTION_POINTER:
            assert self.delegate is not None
            return self.delegate
        return PRIMITIVE_TYPE_MAP[self.kind]


INT = TypeRef(TypeKind.INT)
FLOAT = TypeRef(TypeKind.FLOAT)
VOID = TypeRef(TypeKind.VOID)
POINTER = TypeRef(TypeKind.POINTER)

_PRIMITIVES = {ref.kind: ref for ref in (INT, FLOAT, VOID, POINTER)}


@dataclass(frozen=True)
class Signature:
    return_type: TypeRef
    args: tuple[TypeRef, ...]


@dataclass(frozen=True)
class NativeFunction:
    name: str
    return_type: TypeRef
    args: tuple[TypeRef, ...]

    @property
    def signature(self) -> Signature:
        return Signature(self.return_type, self.args)


@dataclass(frozen=True)
class NativeEnumConstant:
    group: str
    name: str
    value: int


class DelegateTable:
    """Interns function pointer signatures as ``Delegate0``, ``Delegate1``, ..."""

    def __init__(self) -> None:
        self._names: dict[Signature, str] = {}

    def intern(self, signature: Signature) -> str:
        name = self._names.get(signature)
        if name is None:
            name = f"Delegate{len(self._names)}"
            self._names[signature] = name
        return name

    def items(self) -> list[tuple[str, Signature]]:
        return [(name, signature) for signature, name in self._names.items()]

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class NativeSignatures:
    constants: list[NativeEnumConstant]
    functions: list[NativeFunction]
    delegates: DelegateTable


def classify_type_code(code: str | None) -> TypeKind:
    if code in ("I", "i"):
        return TypeKind.INT
    if code == "v":
        return TypeKind.VOID
    if code == "f":
        return TypeKind.FLOAT
    if code and code.startswith("^"):
        return TypeKind.POINTER
    return TypeKind.INVALID


def parse_enum_constant(raw_name: str, raw_value: str | None, prefix: str) -> NativeEnumConstant:
    match = re.match(rf"^{re.escape(prefix)}_([^_]+)_(.+)$", raw_name)
    if not match:
        raise BindgenError(f"invalid enum {raw_name}")
    try:
        value = int(raw_value or "")
    except ValueError as exc:
        raise BindgenError(f"invalid value {raw_value!r} for enum {raw_name}") from exc
    return NativeEnumConstant(group=match.group(1), name=match.group(2), value=value)


class SignatureLoader:
    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.delegates = DelegateTable()

    def resolve_type(self, node: ET.Element) -> TypeRef:
        if node.get("function_pointer") == "true":
            return TypeRef(TypeKind.FUNCTION_POINTER, self.delegates.intern(self.resolve_signature(node)))
        code = node.get("type")
        kind = classify_type_code(code)
        if kind is TypeKind.INVALID:
            raise BindgenError(f"invalid type {code}")
        return _PRIMITIVES[kind]

    def resolve_signature(self, node: ET.Element) -> Signature:
        retvals = node.findall("retval")
        if len(retvals) > 1:
            raise BindgenError(f"multiple return values in {_describe(node)}")
        return_type = self.resolve_type(retvals[0]) if retvals else VOID
        args = tuple(self.resolve_type(arg) for arg in node.findall("arg"))
        return Signature(return_type, args)

    def load(self, root: ET.Element) -> NativeSignatures:
        if root.tag != "signatures":
            raise BindgenError(f"expected <signatures> root, found <{root.tag}>")

        constants: list[NativeEnumConstant] = []
        for elem in root.findall("enum"):
            name = elem.get("name")
            if not name:
                raise BindgenError(f"enum without name: {_describe(elem)}")
            constants.append(parse_enum_constant(name, elem.get("value"), self.config.enum_prefix))

        functions: list[NativeFunction] = []
        for elem in root.findall("function"):
            name = elem.get("name")
            if not name:
                raise BindgenError(f"function without name: {_describe(elem)}")
            signature = self.resolve_signature(elem)
            functions.append(NativeFunction(name, signature.return_type, signature.args))

        return NativeSignatures(constants=constants, functions=functions, delegates=self.delegates)


def load_signatures(root: ET.Element, config: GeneratorConfig) -> NativeSignatures:
    return SignatureLoader(config).load(root)


def parse_metadata_text(text: str | bytes) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise BindgenError(f"invalid metadata document: {exc}") from exc


def load_metadata_file(path: Path) -> ET.Element:
    try:
        text = path.read_bytes()
    except OSError as exc:
        raise BindgenError(f"Unable to read metadata '{path}': {exc}") from exc
    return parse_metadata_text(text)


def _describe(elem: ET.Element) -> str:
    return ET.tostring(elem, encoding="unicode").strip()
