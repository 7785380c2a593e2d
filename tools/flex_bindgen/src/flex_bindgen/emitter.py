"""C# source emission for the binding model.

Output order is fixed so regenerated files diff cleanly: banner, enums,
``NativeFunctions`` (imports, then delegates), the ``Properties`` name enum,
and the ``Item`` partial class.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from .config import GeneratorConfig
from .metadata import TypeRef
from .model import Accessor, BindingModel, EnumType, Property

BANNER = """\
// Copyright (c) Microsoft Corporation. All rights reserved.
// Licensed under the MIT License. See the LICENSE.txt file in the project root
// for the license information.

// This file was generated by {tool_path}. Do not edit manually.

using System;
using System.Runtime.InteropServices;
using static {namespace}.NativeFunctions;

"""


class CodeWriter:
    """Collects lines, indenting each by the current block depth."""

    def __init__(self, indent: str = "    ") -> None:
        self._lines: list[str] = []
        self._indent = indent
        self.depth = 0

    def line(self, text: str = "") -> None:
        rendered = self._indent * self.depth + text
        self._lines.append(rendered if rendered.strip() else "")

    def raw(self, text: str) -> None:
        self._lines.extend(text.splitlines())

    @contextmanager
    def indented(self) -> Iterator[None]:
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        self.line(header)
        self.line("{")
        with self.indented():
            yield
        self.line("}")

    def output(self) -> str:
        return "\n".join(self._lines) + "\n"


def format_parameters(args: tuple[TypeRef, ...]) -> str:
    return ", ".join(f"{arg.csharp} arg{index}" for index, arg in enumerate(args, start=1))


class BindingEmitter:
    def __init__(self, model: BindingModel, config: GeneratorConfig) -> None:
        self.model = model
        self.config = config
        self.writer = CodeWriter()

    def emit(self) -> str:
        out = self.writer
        out.raw(BANNER.format(tool_path=self.config.tool_path, namespace=self.config.namespace))
        with out.block(f"namespace {self.config.namespace}"):
            for enum_type in self.model.enums:
                self.emit_enum(enum_type)
            self.emit_native_functions()
            self.emit_property_names()
            self.emit_item_class()
        return out.output()

    def emit_enum(self, enum_type: EnumType) -> None:
        out = self.writer
        with out.block(f"public enum {enum_type.name} : int"):
            for member in enum_type.members:
                out.line(f"{member.name} = {member.value},")
        out.line()

    def emit_native_functions(self) -> None:
        out = self.writer
        with out.block("internal class NativeFunctions"):
            out.line(f'const string dll_name = "{self.config.dll_name}";')
            out.line()
            for function in self.model.functions:
                out.line(
                    f"[DllImport(dll_name)] public static extern "
                    f"{function.return_type.csharp} {function.name} ({format_parameters(function.args)});"
                )
            out.line()
            for name, signature in self.model.delegates:
                out.line(f"public delegate {signature.return_type.csharp} {name} ({format_parameters(signature.args)});")
        out.line()

    def emit_property_names(self) -> None:
        out = self.writer
        with out.block("enum Properties"):
            for prop in self.model.settable_properties:
                out.line(f"{prop.name},")
        out.line()

    def emit_item_class(self) -> None:
        out = self.writer
        with out.block("public partial class Item"):
            for index, prop in enumerate(self.model.properties):
                if index:
                    out.line()
                self.emit_property(prop)
            out.line()
            out.line("partial void ValidatePropertyValue(Properties property, int value);")
            out.line("partial void ValidatePropertyValue(Properties property, float value);")

    def emit_property(self, prop: Property) -> None:
        out = self.writer
        prefix = self.config.accessor_prefix
        handle = self.config.item_handle
        with out.block(f"public {prop.type_name} {prop.name}"):
            for accessor in prop.accessors:
                if accessor is Accessor.GET:
                    cast = f"({prop.type_name})" if prop.is_enum else ""
                    out.line(f"get {{ return {cast}{prefix}get_{prop.member}({handle}); }}")
                else:
                    cast = "(int)" if prop.is_enum else ""
                    with out.block("set"):
                        out.line(f"ValidatePropertyValue(Properties.{prop.name}, {cast}value);")
                        out.line(f"{prefix}set_{prop.member}({handle}, {cast}value);")


def emit(model: BindingModel, config: GeneratorConfig) -> str:
    return BindingEmitter(model, config).emit()
