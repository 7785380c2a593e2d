from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[3]
SRC_ROOT = REPO_ROOT / "tools" / "flex_bindgen" / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from flex_bindgen.common import BindgenError
from flex_bindgen.config import DEFAULT_CONFIG
from flex_bindgen.metadata import (
    FLOAT,
    INT,
    POINTER,
    VOID,
    DelegateTable,
    Signature,
    TypeKind,
    TypeRef,
    classify_type_code,
    load_metadata_file,
    load_signatures,
    parse_enum_constant,
    parse_metadata_text,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def load_text(text: str):
    return load_signatures(parse_metadata_text(text), DEFAULT_CONFIG)


class TypeCodeTests(unittest.TestCase):
    def test_classifies_primitive_codes(self) -> None:
        self.assertIs(classify_type_code("i"), TypeKind.INT)
        self.assertIs(classify_type_code("I"), TypeKind.INT)
        self.assertIs(classify_type_code("f"), TypeKind.FLOAT)
        self.assertIs(classify_type_code("v"), TypeKind.VOID)
        self.assertIs(classify_type_code("^{flex_item=}"), TypeKind.POINTER)
        self.assertIs(classify_type_code("^v"), TypeKind.POINTER)

    def test_unknown_codes_are_invalid(self) -> None:
        for code in ("d", "c", "*", "{flex_item=}", "", None):
            self.assertIs(classify_type_code(code), TypeKind.INVALID, code)

    def test_csharp_names(self) -> None:
        self.assertEqual(INT.csharp, "int")
        self.assertEqual(FLOAT.csharp, "float")
        self.assertEqual(VOID.csharp, "void")
        self.assertEqual(POINTER.csharp, "IntPtr")
        self.assertEqual(TypeRef(TypeKind.FUNCTION_POINTER, "Delegate3").csharp, "Delegate3")


class EnumConstantTests(unittest.TestCase):
    def test_splits_group_and_member(self) -> None:
        constant = parse_enum_constant("FLEX_ALIGN_SPACE_BETWEEN", "5", "FLEX")
        self.assertEqual(constant.group, "ALIGN")
        self.assertEqual(constant.name, "SPACE_BETWEEN")
        self.assertEqual(constant.value, 5)

    def test_negative_values(self) -> None:
        self.assertEqual(parse_enum_constant("FLEX_WRAP_REVERSE", "-1", "FLEX").value, -1)

    def test_rejects_names_without_group_and_member(self) -> None:
        for raw in ("FLEX_ALIGN", "ALIGN_AUTO", "FLEX__AUTO", "OTHER_ALIGN_AUTO"):
            with self.assertRaises(BindgenError) as ctx:
                parse_enum_constant(raw, "0", "FLEX")
            self.assertIn(raw, str(ctx.exception))

    def test_rejects_non_integer_value(self) -> None:
        with self.assertRaises(BindgenError):
            parse_enum_constant("FLEX_ALIGN_AUTO", "auto", "FLEX")
        with self.assertRaises(BindgenError):
            parse_enum_constant("FLEX_ALIGN_AUTO", None, "FLEX")


class DelegateTableTests(unittest.TestCase):
    def test_identical_signatures_share_a_name(self) -> None:
        table = DelegateTable()
        first = table.intern(Signature(VOID, (POINTER, POINTER)))
        second = table.intern(Signature(VOID, (POINTER, POINTER)))
        self.assertEqual(first, "Delegate0")
        self.assertEqual(second, "Delegate0")
        self.assertEqual(len(table), 1)

    def test_distinct_signatures_numbered_in_discovery_order(self) -> None:
        table = DelegateTable()
        self.assertEqual(table.intern(Signature(INT, ())), "Delegate0")
        self.assertEqual(table.intern(Signature(VOID, (INT,))), "Delegate1")
        self.assertEqual(table.intern(Signature(INT, ())), "Delegate0")
        self.assertEqual(table.intern(Signature(VOID, (FLOAT,))), "Delegate2")
        self.assertEqual([name for name, _ in table.items()], ["Delegate0", "Delegate1", "Delegate2"])


class LoaderTests(unittest.TestCase):
    def test_loads_fixture_document(self) -> None:
        signatures = load_signatures(load_metadata_file(FIXTURES / "flex.bs"), DEFAULT_CONFIG)

        self.assertEqual(len(signatures.constants), 10)
        self.assertEqual(signatures.constants[0].group, "ALIGN")
        self.assertEqual(signatures.constants[0].name, "AUTO")
        self.assertEqual(len(signatures.functions), 16)
        self.assertEqual(len(signatures.delegates), 1)

        by_name = {function.name: function for function in signatures.functions}
        self.assertEqual(by_name["flex_item_new"].return_type, POINTER)
        self.assertEqual(by_name["flex_item_new"].args, ())
        self.assertEqual(by_name["flex_layout"].return_type, VOID)
        self.assertEqual(by_name["flex_item_set_width"].args, (POINTER, FLOAT))
        self.assertEqual(by_name["flex_item_get_self_sizing"].return_type.csharp, "Delegate0")
        self.assertEqual(by_name["flex_item_set_self_sizing"].args[1].csharp, "Delegate0")

    def test_nested_function_pointers_are_interned_inner_first(self) -> None:
        signatures = load_text(
            """<signatures>
            <function name="flex_item_set_hook">
              <arg type="^{flex_item=}"/>
              <arg function_pointer="true" type="^?">
                <arg function_pointer="true" type="^?"><retval type="i"/></arg>
                <retval type="v"/>
              </arg>
            </function>
            <function name="flex_item_set_other">
              <arg type="^{flex_item=}"/>
              <arg function_pointer="true" type="^?"><retval type="i"/></arg>
            </function>
            </signatures>"""
        )
        names = dict(signatures.delegates.items())
        self.assertEqual(names["Delegate0"], Signature(INT, ()))
        self.assertEqual(names["Delegate1"].args[0].csharp, "Delegate0")
        hook, other = signatures.functions
        self.assertEqual(hook.args[1].csharp, "Delegate1")
        self.assertEqual(other.args[1].csharp, "Delegate0")

    def test_invalid_type_code_is_fatal(self) -> None:
        with self.assertRaises(BindgenError) as ctx:
            load_text('<signatures><function name="flex_x"><retval type="d"/></function></signatures>')
        self.assertIn("invalid type d", str(ctx.exception))

    def test_invalid_enum_name_is_fatal(self) -> None:
        with self.assertRaises(BindgenError) as ctx:
            load_text('<signatures><enum name="FLEX_BROKEN" value="1"/></signatures>')
        self.assertIn("FLEX_BROKEN", str(ctx.exception))

    def test_rejects_wrong_root_and_malformed_xml(self) -> None:
        with self.assertRaises(BindgenError):
            load_text("<bridgesupport/>")
        with self.assertRaises(BindgenError):
            parse_metadata_text("<signatures>")

    def test_rejects_multiple_return_values(self) -> None:
        with self.assertRaises(BindgenError):
            load_text('<signatures><function name="flex_x"><retval type="i"/><retval type="f"/></function></signatures>')

    def test_missing_metadata_file(self) -> None:
        with self.assertRaises(BindgenError):
            load_metadata_file(FIXTURES / "missing.bs")


if __name__ == "__main__":
    unittest.main()
