from __future__ import annotations

import json
import re

import pytest

import operations
from catalog import ValidationError

EXPECTED = {
    "get_document_info", "create_document", "open_document", "save_document", "close_document",
    "add_page", "delete_page", "duplicate_page", "navigate_to_page",
    "create_text_frame", "edit_text_frame", "find_replace_text",
    "place_image", "create_rectangle", "create_ellipse",
    "create_paragraph_style", "create_character_style", "apply_paragraph_style", "list_styles",
    "create_color_swatch", "list_color_swatches", "apply_color",
    "create_table", "populate_table",
    "create_layer", "set_active_layer", "list_layers",
    "export_pdf", "export_images", "export_epub", "package_document",
    "execute_indesign_code", "preflight_document", "view_document", "zoom_to_page", "data_merge",
}

_SAMPLES = {"string": "sample", "number": 10, "integer": 3, "boolean": True}
_ARRAY_SAMPLES = {"colorValues": [0, 100, 100, 0], "data": [["a", "b"], ["1", "2"]]}


def _minimal(op: operations.Operation) -> dict:
    args = {}
    for param in op.params:
        if not param.required:
            continue
        if param.type == "array":
            args[param.name] = _ARRAY_SAMPLES[param.name]
        else:
            args[param.name] = _SAMPLES[param.type]
    return args


def _payload(op_name: str, /, **arguments) -> str:
    op = operations.get(op_name)
    return op.render(op.validate(arguments))


def test_catalog_has_every_operation_once() -> None:
    names = [op.name for op in operations.CATALOG]
    assert len(names) == len(set(names)) == 36
    assert set(names) == EXPECTED


@pytest.mark.parametrize("op", operations.CATALOG, ids=lambda op: op.name)
def test_every_operation_renders_with_minimal_arguments(op: operations.Operation) -> None:
    payload = op.render(op.validate(_minimal(op)))
    assert payload.isascii()
    if op.no_document is not None:
        assert json.dumps(op.no_document) in payload


@pytest.mark.parametrize("op", operations.CATALOG, ids=lambda op: op.name)
def test_every_schema_rejects_extra_properties(op: operations.Operation) -> None:
    assert op.input_schema()["additionalProperties"] is False


def test_labels_and_flags() -> None:
    assert operations.get("delete_page").undo_name == "MCP: Delete Page"
    assert operations.get("find_replace_text").label == "Find/Replace Text"
    assert operations.get("get_document_info").undo_name is None
    assert operations.get("list_layers").undo_name is None
    assert operations.get("export_pdf").long_running
    assert operations.get("data_merge").long_running
    assert not operations.get("delete_page").long_running


def test_no_document_messages() -> None:
    assert operations.get("create_text_frame").no_document == "No document open. Please create a document first."
    assert operations.get("save_document").no_document == "No document open to save"
    assert operations.get("close_document").no_document == "No document open to close"
    for name in ("create_document", "open_document", "execute_indesign_code"):
        assert operations.get(name).no_document is None


def test_delete_page_refuses_last_page_and_bad_index() -> None:
    payload = _payload("delete_page", pageIndex=0)
    assert '"Invalid page index: " + 0 + ". Document has " + doc.pages.length + " pages."' in payload
    assert '"Cannot delete the last page in the document."' in payload
    assert "doc.pages[0].remove();" in payload
    assert payload.index("Invalid page index") < payload.index("Cannot delete the last page")


def test_delete_page_requires_index() -> None:
    with pytest.raises(ValidationError, match="pageIndex"):
        operations.get("delete_page").validate({})


def test_negative_index_rejected() -> None:
    with pytest.raises(ValidationError, match="pageIndex must be >= 0"):
        operations.get("navigate_to_page").validate({"pageIndex": -1})


def test_text_content_is_embedded_as_one_safe_literal() -> None:
    content = 'Say "hi"\nsecond line \\ end '
    payload = _payload("create_text_frame", content=content)
    match = re.search(r'textFrame\.contents = (".*");', payload)
    assert json.loads(match.group(1)) == content


def test_optional_clauses_are_omitted() -> None:
    plain = _payload("create_text_frame", content="x")
    styled = _payload("create_text_frame", content="x", paragraphStyle="Body")
    assert "paragraphStyles" not in plain
    assert 'doc.paragraphStyles.itemByName("Body")' in styled


def test_text_frame_defaults() -> None:
    payload = _payload("create_text_frame", content="x")
    assert 'textFrame.geometricBounds = ["10mm", "10mm", "60mm", "110mm"];' in payload
    assert "story.pointSize = 12;" in payload
    assert 'app.fonts.itemByName("Helvetica Neue\\tRegular")' in payload
    assert "Justification.LEFT_ALIGN" in payload


def test_justify_maps_to_full_justification() -> None:
    payload = _payload("edit_text_frame", frameIndex=0, alignment="JUSTIFY")
    assert "story.justification = Justification.LEFT_JUSTIFIED;" in payload


def test_hex_colors_are_created_as_rgb() -> None:
    payload = _payload("create_rectangle", x=0, y=0, width=10, height=10, fillColor="#ff8000")
    assert '"#FF8000", [255, 128, 0]' in payload
    assert "ColorSpace.RGB" in payload


def test_swatch_names_are_looked_up() -> None:
    payload = _payload("create_ellipse", x=0, y=0, width=10, height=10, strokeColor="Paper", strokeWidth=2)
    assert 'ellipse.strokeColor = doc.swatches.itemByName("Paper");' in payload
    assert 'ellipse.strokeWeight = "2pt";' in payload


def test_rounded_corners_only_with_radius() -> None:
    square = _payload("create_rectangle", x=0, y=0, width=10, height=10)
    rounded = _payload("create_rectangle", x=0, y=0, width=10, height=10, cornerRadius=3)
    assert "CornerOptions" not in square
    assert '"topLeftCornerRadius": "3mm"' in rounded


def test_create_document_presets() -> None:
    payload = _payload("create_document", preset="A4", orientation="Landscape", bleed=3)
    assert 'doc.documentPreferences.pageWidth = "297mm";' in payload
    assert 'doc.documentPreferences.pageHeight = "210mm";' in payload
    assert '"documentBleedTopOffset": "3mm"' in payload
    assert "slugTopOffset" not in payload


def test_create_document_custom_needs_size() -> None:
    op = operations.get("create_document")
    with pytest.raises(ValidationError, match="width and height"):
        op.validate({"preset": "Custom", "width": 100})
    payload = op.render(op.validate({"preset": "Custom", "width": 100, "height": 150.5}))
    assert 'pageHeight = "150.5mm";' in payload


def test_color_swatch_value_count() -> None:
    op = operations.get("create_color_swatch")
    with pytest.raises(ValidationError, match="4 values for CMYK"):
        op.validate({"name": "Brand", "colorValues": [0, 0, 0]})
    payload = op.render(op.validate({"name": "Brand", "colorModel": "RGB", "colorValues": [10, 20, 30]}))
    assert '"space": ColorSpace.RGB' in payload
    assert '"colorValue": [10, 20, 30]' in payload


def test_pdf_page_range() -> None:
    assert "PageRange.ALL_PAGES" in _payload("export_pdf", filePath="/tmp/out.pdf")
    assert 'pageRange = "2-5,7";' in _payload("export_pdf", filePath="/tmp/out.pdf", pageRange="2 - 5, 7")
    with pytest.raises(ValidationError, match="pageRange"):
        operations.get("export_pdf").validate({"filePath": "/tmp/out.pdf", "pageRange": "1-x"})
    with pytest.raises(ValidationError, match="invalid range"):
        operations.get("export_pdf").validate({"filePath": "/tmp/out.pdf", "pageRange": "5-2"})


def test_pdf_preset_names() -> None:
    payload = _payload("export_pdf", filePath="/tmp/out.pdf", preset="PressQuality")
    assert 'app.pdfExportPresets.itemByName("[Press Quality]")' in payload


def test_export_images_ranges_and_fallback() -> None:
    payload = _payload("export_images", folderPath="/tmp/out", format="TIFF", pageRange="2-3")
    assert "var ranges = [[1, 2]];" in payload
    assert "ExportFormat.PNG_FORMAT" in payload
    assert "TIFF is not supported for page export" in payload
    jpeg = _payload("export_images", folderPath="/tmp/out", format="JPEG")
    assert "var ranges = [[0, doc.pages.length - 1]];" in jpeg
    assert "ExportFormat.JPG" in jpeg


def test_find_replace_modes() -> None:
    text = _payload("find_replace_text", findText="a", replaceText="b", caseSensitive=True)
    grep = _payload("find_replace_text", findText="\\d+", replaceText="#", useGrep=True, scope="story")
    assert "var changed = target.changeText();" in text
    assert "app.findChangeTextOptions.caseSensitive = true;" in text
    assert "var target = doc;" in text
    assert "var changed = target.changeGrep();" in grep
    assert "findChangeTextOptions" not in grep
    assert 'app.findGrepPreferences.findWhat = "\\\\d+";' in grep
    assert "app.selection[0].parentStory" in grep


def test_apply_paragraph_style_range_needs_both_ends() -> None:
    op = operations.get("apply_paragraph_style")
    with pytest.raises(ValidationError, match="together"):
        op.validate({"styleName": "Body", "frameIndex": 0, "startIndex": 3})
    payload = op.render(op.validate({"styleName": "Body", "frameIndex": 0, "startIndex": 3, "endIndex": 9}))
    assert "characters.itemByRange(3, 9)" in payload


def test_create_table_needs_a_body_row() -> None:
    op = operations.get("create_table")
    with pytest.raises(ValidationError, match="body row"):
        op.validate({"x": 0, "y": 0, "width": 100, "height": 50, "rows": 1, "columns": 2})


def test_populate_table_cells_become_strings() -> None:
    payload = _payload("populate_table", tableIndex=0, data=[["Name", 1, 2.5, None, True]], includeHeaders=False)
    assert 'var data = [["Name", "1", "2.5", "", "true"]];' in payload
    assert "var firstRow = table.headerRowCount;" in payload


def test_add_page_positions() -> None:
    assert "doc.pages.add(LocationOptions.AT_END);" in _payload("add_page")
    after = _payload("add_page", position="after", pageIndex=2, masterPage="B-Master")
    assert "doc.pages.add(LocationOptions.AFTER, page);" in after
    assert 'doc.masterSpreads.itemByName("B-Master")' in after


def test_layer_color_uses_ui_color_key() -> None:
    payload = _payload("create_layer", name="Notes", color="light blue")
    assert 'UIColors["LIGHT_BLUE"]' in payload


def test_data_merge_record_range() -> None:
    payload = _payload("data_merge", dataSourcePath="/tmp/d.csv", outputFolder="/tmp/out",
                       fileFormat="BOTH", recordRange="1-10")
    assert "prefs.recordSelection = RecordSelection.RANGE;" in payload
    assert 'prefs.recordRange = "1-10";' in payload
    assert "dmp.exportFile(pdfFile" in payload
    assert "dmp.mergeRecords();" in payload


def test_execute_code_passes_through_unmodified() -> None:
    code = "var x = 1;\nx + 1;"
    assert _payload("execute_indesign_code", code=code) == code
