from __future__ import annotations

import json

import pytest

from extendscript import Code, RenderError, block, enum_member, literal, mm, pt, quote, template


def test_quote_reads_back_as_the_same_text() -> None:
    text = 'He said "hi"\nC:\\temp\\file.indd   café \U0001F600'
    rendered = quote(text)
    assert rendered.isascii()
    assert "\n" not in rendered
    assert json.loads(rendered) == text


def test_literal_scalars() -> None:
    assert literal(True) == "true"
    assert literal(False) == "false"
    assert literal(None) == "null"
    assert literal(3) == "3"
    assert literal(3.0) == "3"
    assert literal(2.5) == "2.5"
    assert literal("a") == '"a"'


def test_literal_lengths_carry_units() -> None:
    assert literal(mm(12.5)) == '"12.5mm"'
    assert literal(pt(1)) == '"1pt"'


def test_literal_collections() -> None:
    assert literal([1, "a", mm(2)]) == '[1, "a", "2mm"]'
    assert literal({"name": "X", "visible": False}) == '{"name": "X", "visible": false}'
    assert literal({"model": enum_member("ColorModel", "SPOT")}) == '{"model": ColorModel.SPOT}'


@pytest.mark.parametrize("value", [float("nan"), float("inf"), object(), {1: 2}])
def test_literal_rejects_unrenderable_values(value) -> None:
    with pytest.raises(RenderError):
        literal(value)


def test_enum_member_checks_identifiers() -> None:
    assert enum_member("Justification", "LEFT_ALIGN").text == "Justification.LEFT_ALIGN"
    with pytest.raises(RenderError, match="invalid identifier"):
        enum_member("Justification", "LEFT_ALIGN; alert(1)")


def test_template_escapes_string_values() -> None:
    hostile = '"); app.quit(); ("'
    code = template("var s = $S$;", s=hostile)
    assert code.text.startswith("var s = ")
    assert json.loads(code.text[len("var s = "):-1]) == hostile


def test_template_accepts_a_source_placeholder() -> None:
    code = template("var f = File($SOURCE$);", source="/tmp/d.csv")
    assert code.text == 'var f = File("/tmp/d.csv");'


def test_template_drops_lines_bound_to_none() -> None:
    code = template(
        """
        a();
        $OPTIONAL$
        b();
        """,
        optional=None,
    )
    assert code.text == "a();\nb();"


def test_template_none_must_stand_alone() -> None:
    with pytest.raises(RenderError, match="own line"):
        template("x = $V$;", v=None)


def test_template_reports_missing_and_unused_values() -> None:
    with pytest.raises(RenderError, match="no value"):
        template("x = $A$;")
    with pytest.raises(RenderError, match="unused"):
        template("x = 1;", a=1)


def test_template_indents_nested_code() -> None:
    code = template(
        """
        if (x) {
            $BODY$
        }
        """,
        body=Code("a();\nb();"),
    )
    assert code.text == "if (x) {\n    a();\n    b();\n}"


def test_block_skips_missing_parts() -> None:
    assert block(None, Code("a();"), None, Code("b();")).text == "a();\nb();"
    assert block(None, None) is None
