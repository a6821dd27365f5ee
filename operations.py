"""
InDesign operations.

The fixed catalog of document-editing operations served over MCP:
  Document   get_document_info, create_document, open_document, save_document,
             close_document
  Pages      add_page, delete_page, duplicate_page, navigate_to_page
  Text       create_text_frame, edit_text_frame, find_replace_text
  Graphics   place_image, create_rectangle, create_ellipse
  Styles     create_paragraph_style, create_character_style,
             apply_paragraph_style, list_styles
  Color      create_color_swatch, list_color_swatches, apply_color
  Tables     create_table, populate_table
  Layers     create_layer, set_active_layer, list_layers
  Export     export_pdf, export_images, export_epub, package_document
  Utilities  execute_indesign_code, preflight_document, view_document,
             zoom_to_page, data_merge

Builders receive parameters already validated by ``catalog.Operation`` and
return ExtendScript whose final expression is a human-readable status line.
Conventions inside the generated scripts:
- ``doc`` is bound by the catalog's no-document guard
- indices are range-checked in the script and answered with a status line
- best-effort steps (fonts, colours, base styles) push onto ``warnings``
  instead of failing the whole operation
"""

import json
import re

from catalog import Operation, Param, ValidationError
from extendscript import Code, block, enum_member, mm, number, pt, template

NO_DOCUMENT = "No document open"
NO_DOCUMENT_CREATE_FIRST = "No document open. Please create a document first."

ALIGNMENTS = ("LEFT_ALIGN", "CENTER_ALIGN", "RIGHT_ALIGN", "JUSTIFY")
# Justification has no JUSTIFY member; full justification is LEFT_JUSTIFIED.
_JUSTIFICATION = {
    "LEFT_ALIGN": "LEFT_ALIGN",
    "CENTER_ALIGN": "CENTER_ALIGN",
    "RIGHT_ALIGN": "RIGHT_ALIGN",
    "JUSTIFY": "LEFT_JUSTIFIED",
}

# Portrait width x height in mm
PAGE_SIZES = {
    "A3": (297, 420),
    "A4": (210, 297),
    "A5": (148, 210),
    "Letter": (215.9, 279.4),
    "Legal": (215.9, 355.6),
}

_PDF_PRESETS = {
    "Print": "[PDF/X-4:2008]",
    "Web": "[Smallest File Size]",
    "SmallestFileSize": "[Smallest File Size]",
    "HighQualityPrint": "[High Quality Print]",
    "PressQuality": "[Press Quality]",
}

_CORNERS = ("topLeft", "topRight", "bottomLeft", "bottomRight")

_HEX_COLOR = re.compile(r"^#([0-9A-Fa-f]{6})$")
_RANGE_PART = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")

_WARNINGS = Code('(warnings.length ? " (warnings: " + warnings.join("; ") + ")" : "")')


# ---------------------------------------------------------------------------
# Shared parameters
# ---------------------------------------------------------------------------

def _page_index(description: str = "Page index (0-based)", default: int | None = 0,
                required: bool = False) -> Param:
    return Param("pageIndex", "integer", description, default=None if required else default,
                 required=required, minimum=0)


def _length(name: str, description: str, default: float | None = None,
            required: bool = False) -> Param:
    return Param(name, "number", description, default=default, required=required)


def _text(name: str, description: str, default: str | None = None, required: bool = False,
          enum: tuple[str, ...] | None = None) -> Param:
    return Param(name, "string", description, default=default, required=required, enum=enum)


def _flag(name: str, description: str, default: bool) -> Param:
    return Param(name, "boolean", description, default=default)


# ---------------------------------------------------------------------------
# Script helpers
# ---------------------------------------------------------------------------

def _bounds(x: float, y: float, width: float, height: float) -> list:
    """geometricBounds [top, left, bottom, right] in millimetres."""
    return [mm(y), mm(x), mm(y + height), mm(x + width)]


def _size_text(width: float, height: float) -> str:
    return f"{number(width)}mm x {number(height)}mm"


def _assign(target: str, prop: str, value) -> Code:
    return template("$TARGET$.$PROP$ = $VALUE$;", target=Code(target), prop=Code(prop), value=value)


def _color_expr(color: str) -> Code:
    """Expression resolving *color* to a swatch.

    ``#RRGGBB`` values are looked up by that name and created as RGB process
    colours when missing; anything else is a swatch name.
    """
    match = _HEX_COLOR.match(color.strip())
    if match is None:
        return template("doc.swatches.itemByName($NAME$)", name=color)
    digits = match.group(1).upper()
    rgb = [int(digits[i:i + 2], 16) for i in (0, 2, 4)]
    return template(
        r"""
        (function (name, rgb) {
            var c = doc.colors.itemByName(name);
            if (!c.isValid) {
                c = doc.colors.add({name: name, model: ColorModel.PROCESS, space: ColorSpace.RGB, colorValue: rgb});
            }
            return c;
        })($NAME$, $RGB$)""",
        name="#" + digits,
        rgb=rgb,
    )


def _set_color(target: str, prop: str, color: str) -> Code:
    return template(
        r"""
        try {
            $TARGET$.$PROP$ = $COLOR$;
        } catch (e) {
            warnings.push($WHAT$ + ": " + e.message);
        }
        """,
        target=Code(target),
        prop=Code(prop),
        color=_color_expr(color),
        what=f"{prop} {color}",
    )


def _set_font(target: str, family: str, style: str | None = None) -> Code:
    """Apply a font, falling back to the family alone when the style is missing."""
    if style is None:
        return template(
            r"""
            try {
                $TARGET$.appliedFont = app.fonts.itemByName($FAMILY$);
            } catch (e) {
                warnings.push("font " + $FAMILY$ + " not available");
            }
            """,
            target=Code(target),
            family=family,
        )
    return template(
        r"""
        try {
            $TARGET$.appliedFont = app.fonts.itemByName($FONT$);
        } catch (e) {
            try {
                $TARGET$.appliedFont = app.fonts.itemByName($FAMILY$);
            } catch (e2) {
                warnings.push("font " + $FAMILY$ + " not available");
            }
        }
        """,
        target=Code(target),
        font=f"{family}\t{style}",
        family=family,
    )


def _justification(alignment: str) -> Code:
    return enum_member("Justification", _JUSTIFICATION[alignment])


def _on_page(page_index: int, body: Code) -> Code:
    return template(
        r"""
        if ($INDEX$ >= doc.pages.length) {
            "Invalid page index: " + $INDEX$ + ". Document has " + doc.pages.length + " pages.";
        } else {
            var page = doc.pages[$INDEX$];
            $BODY$
        }
        """,
        index=page_index,
        body=body,
    )


def _text_frame_on_page(page_index: int, frame_index: int, body: Code) -> Code:
    return _on_page(page_index, template(
        r"""
        if ($FRAME$ >= page.textFrames.length) {
            "Invalid text frame index: " + $FRAME$ + ". Page has " + page.textFrames.length + " text frames.";
        } else {
            var textFrame = page.textFrames[$FRAME$];
            $BODY$
        }
        """,
        frame=frame_index,
        body=body,
    ))


def _parse_ranges(name: str, text: str) -> list[tuple[int, int]] | None:
    """Parse ``"all"``, ``"3"``, ``"2-5"`` or ``"1-3, 7"`` into 1-based ranges.

    Returns None for ``"all"``.
    """
    if text.strip().lower() == "all":
        return None
    ranges = []
    for part in text.split(","):
        match = _RANGE_PART.match(part)
        if match is None:
            raise ValidationError(f"{name} must be 'all' or like '1-5' or '2, 4-6', got {text!r}")
        start = int(match.group(1))
        end = int(match.group(2) or start)
        if start < 1 or end < start:
            raise ValidationError(f"{name} has an invalid range: {part.strip()!r}")
        ranges.append((start, end))
    return ranges


def _range_text(ranges: list[tuple[int, int]]) -> str:
    return ",".join(str(a) if a == b else f"{a}-{b}" for a, b in ranges)


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return number(value)
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Document management
# ---------------------------------------------------------------------------

def _get_document_info(p: dict) -> Code:
    return Code(r"""
var textFrames = 0;
var rectangles = 0;
var shapes = 0;
for (var i = 0; i < doc.pages.length; i++) {
    textFrames += doc.pages[i].textFrames.length;
    rectangles += doc.pages[i].rectangles.length;
    shapes += doc.pages[i].ovals.length + doc.pages[i].polygons.length;
}
var info = "=== DOCUMENT INFORMATION ===\n";
info += "Name: " + doc.name + "\n";
info += "Pages: " + doc.pages.length + "\n";
info += "Width: " + doc.documentPreferences.pageWidth + "\n";
info += "Height: " + doc.documentPreferences.pageHeight + "\n";
info += "Facing Pages: " + doc.documentPreferences.facingPages + "\n";
info += "Modified: " + doc.modified + "\n";
info += "File Path: " + (doc.saved ? doc.fullName.fsName : "Unsaved") + "\n";
info += "\n=== MARGINS ===\n";
info += "Top: " + doc.marginPreferences.top + "\n";
info += "Bottom: " + doc.marginPreferences.bottom + "\n";
info += "Left: " + doc.marginPreferences.left + "\n";
info += "Right: " + doc.marginPreferences.right + "\n";
info += "\n=== CONTENT SUMMARY ===\n";
info += "Text Frames: " + textFrames + "\n";
info += "Images/Rectangles: " + rectangles + "\n";
info += "Shapes: " + shapes + "\n";
info += "Layers: " + doc.layers.length + "\n";
info += "Color Swatches: " + doc.swatches.length;
info;""".strip("\n"))


def _check_create_document(p: dict):
    if p["preset"] == "Custom" and ("width" not in p or "height" not in p):
        raise ValidationError("width and height are required for the Custom preset")


def _create_document(p: dict) -> Code:
    if p["preset"] == "Custom":
        width, height = p["width"], p["height"]
    else:
        width, height = PAGE_SIZES[p["preset"]]
        if p["orientation"] == "Landscape":
            width, height = height, width

    bleed = None
    if p["bleed"] > 0:
        bleed = template(
            "doc.documentPreferences.properties = $OFFSETS$;",
            offsets={
                "documentBleedTopOffset": mm(p["bleed"]),
                "documentBleedBottomOffset": mm(p["bleed"]),
                "documentBleedInsideOrLeftOffset": mm(p["bleed"]),
                "documentBleedOutsideOrRightOffset": mm(p["bleed"]),
            },
        )
    slug = None
    if p["slug"] > 0:
        slug = template(
            "doc.documentPreferences.properties = $OFFSETS$;",
            offsets={
                "slugTopOffset": mm(p["slug"]),
                "slugBottomOffset": mm(p["slug"]),
                "slugInsideOrLeftOffset": mm(p["slug"]),
                "slugRightOrOutsideOffset": mm(p["slug"]),
            },
        )

    return template(
        r"""
        var doc = app.documents.add();
        doc.viewPreferences.horizontalMeasurementUnits = MeasurementUnits.MILLIMETERS;
        doc.viewPreferences.verticalMeasurementUnits = MeasurementUnits.MILLIMETERS;
        doc.documentPreferences.facingPages = $FACING$;
        doc.documentPreferences.pagesPerDocument = $PAGES$;
        doc.documentPreferences.pageWidth = $WIDTH$;
        doc.documentPreferences.pageHeight = $HEIGHT$;
        $BLEED$
        $SLUG$
        var margins = $MARGINS$;
        doc.marginPreferences.properties = margins;
        doc.pages.everyItem().marginPreferences.properties = margins;
        "Document created: " + $PRESET$ + " (" + doc.documentPreferences.pageWidth + " x " + doc.documentPreferences.pageHeight + "), " + doc.pages.length + " pages, " + (doc.documentPreferences.facingPages ? "facing pages" : "single pages");
        """,
        facing=p["facingPages"],
        pages=p["pages"],
        width=mm(width),
        height=mm(height),
        bleed=bleed,
        slug=slug,
        margins={
            "top": mm(p["marginTop"]),
            "bottom": mm(p["marginBottom"]),
            "left": mm(p["marginLeft"]),
            "right": mm(p["marginRight"]),
        },
        preset=p["preset"],
    )


def _open_document(p: dict) -> Code:
    return template(
        r"""
        var file = File($PATH$);
        if (!file.exists) {
            "File not found: " + $PATH$;
        } else {
            var opened = app.open(file);
            "Document opened: " + opened.name + " (" + opened.pages.length + " pages)";
        }
        """,
        path=p["filePath"],
    )


def _save_document(p: dict) -> Code:
    if "filePath" in p:
        return template(
            r"""
            var file = File($PATH$);
            doc.save(file);
            "Document saved as: " + file.fsName;
            """,
            path=p["filePath"],
        )
    return Code(r"""
if (doc.saved) {
    doc.save();
    "Document saved: " + doc.name;
} else {
    "Document has never been saved. Please provide a file path.";
}""".strip("\n"))


def _close_document(p: dict) -> Code:
    return template(
        r"""
        var docName = doc.name;
        doc.close($SAVE$);
        "Document closed: " + docName;
        """,
        save=enum_member("SaveOptions", "YES" if p["save"] else "NO"),
    )


# ---------------------------------------------------------------------------
# Page management
# ---------------------------------------------------------------------------

_LOCATIONS = {"before": "BEFORE", "after": "AFTER", "end": "AT_END"}


def _add_page(p: dict) -> Code:
    master = None
    if "masterPage" in p:
        master = template(
            r"""
            var master = doc.masterSpreads.itemByName($MASTER$);
            if (master.isValid) {
                newPage.appliedMaster = master;
            } else {
                warnings.push("master " + $MASTER$ + " not found");
            }
            """,
            master=p["masterPage"],
        )
    report = template(
        r"""
        var warnings = [];
        $MASTER$
        "Page added at position " + (newPage.documentOffset + 1) + ". Total pages: " + doc.pages.length + $WARNINGS$;
        """,
        master=master,
        warnings=_WARNINGS,
    )

    if p["position"] == "end":
        return block(Code("var newPage = doc.pages.add(LocationOptions.AT_END);"), report)
    return _on_page(p.get("pageIndex", 0), block(
        template(
            "var newPage = doc.pages.add($LOCATION$, page);",
            location=enum_member("LocationOptions", _LOCATIONS[p["position"]]),
        ),
        report,
    ))


def _delete_page(p: dict) -> Code:
    return template(
        r"""
        if ($INDEX$ >= doc.pages.length) {
            "Invalid page index: " + $INDEX$ + ". Document has " + doc.pages.length + " pages.";
        } else if (doc.pages.length === 1) {
            "Cannot delete the last page in the document.";
        } else {
            doc.pages[$INDEX$].remove();
            "Page " + ($INDEX$ + 1) + " deleted. Remaining pages: " + doc.pages.length;
        }
        """,
        index=p["pageIndex"],
    )


def _duplicate_page(p: dict) -> Code:
    if p["position"] == "end":
        duplicate = Code("var newPage = page.duplicate(LocationOptions.AT_END);")
    else:
        duplicate = template(
            "var newPage = page.duplicate($LOCATION$, page);",
            location=enum_member("LocationOptions", _LOCATIONS[p["position"]]),
        )
    return _on_page(p["pageIndex"], block(
        duplicate,
        template(
            r"""
            "Page " + ($INDEX$ + 1) + " duplicated. New page position: " + (newPage.documentOffset + 1);
            """,
            index=p["pageIndex"],
        ),
    ))


def _navigate_to_page(p: dict) -> Code:
    return _on_page(p["pageIndex"], template(
        r"""
        app.activeWindow.activePage = page;
        "Navigated to page " + ($INDEX$ + 1);
        """,
        index=p["pageIndex"],
    ))


# ---------------------------------------------------------------------------
# Text management
# ---------------------------------------------------------------------------

def _create_text_frame(p: dict) -> Code:
    content = p["content"]
    preview = content[:50] + ("..." if len(content) > 50 else "")

    paragraph_style = None
    if "paragraphStyle" in p:
        paragraph_style = template(
            r"""
            var pStyle = doc.paragraphStyles.itemByName($NAME$);
            if (pStyle.isValid) {
                story.paragraphs.everyItem().appliedParagraphStyle = pStyle;
            } else {
                warnings.push("paragraph style " + $NAME$ + " not found");
            }
            """,
            name=p["paragraphStyle"],
        )
    character_style = None
    if "characterStyle" in p:
        character_style = template(
            r"""
            var cStyle = doc.characterStyles.itemByName($NAME$);
            if (cStyle.isValid) {
                story.characters.everyItem().appliedCharacterStyle = cStyle;
            } else {
                warnings.push("character style " + $NAME$ + " not found");
            }
            """,
            name=p["characterStyle"],
        )

    return _on_page(p["pageIndex"], template(
        r"""
        var warnings = [];
        var textFrame = page.textFrames.add();
        textFrame.geometricBounds = $BOUNDS$;
        textFrame.contents = $CONTENT$;
        var story = textFrame.parentStory;
        $FONT$
        story.pointSize = $SIZE$;
        $COLOR$
        story.justification = $ALIGNMENT$;
        $PARAGRAPH_STYLE$
        $CHARACTER_STYLE$
        "Text frame created on page " + ($INDEX$ + 1) + " with content: " + $PREVIEW$ + $WARNINGS$;
        """,
        bounds=_bounds(p["x"], p["y"], p["width"], p["height"]),
        content=content,
        font=_set_font("story", p["fontFamily"], p["fontStyle"]),
        size=p["fontSize"],
        color=_set_color("story", "fillColor", p["textColor"]),
        alignment=_justification(p["alignment"]),
        paragraph_style=paragraph_style,
        character_style=character_style,
        index=p["pageIndex"],
        preview=preview,
        warnings=_WARNINGS,
    ))


def _edit_text_frame(p: dict) -> Code:
    changes = block(
        _assign("textFrame", "contents", p["content"]) if "content" in p else None,
        _assign("story", "pointSize", p["fontSize"]) if "fontSize" in p else None,
        _set_font("story", p["fontFamily"]) if "fontFamily" in p else None,
        _set_color("story", "fillColor", p["textColor"]) if "textColor" in p else None,
        _assign("story", "justification", _justification(p["alignment"])) if "alignment" in p else None,
    )
    return _text_frame_on_page(p["pageIndex"], p["frameIndex"], template(
        r"""
        var warnings = [];
        var story = textFrame.parentStory;
        $CHANGES$
        "Text frame " + $FRAME$ + " on page " + ($PAGE$ + 1) + " updated successfully" + $WARNINGS$;
        """,
        changes=changes,
        frame=p["frameIndex"],
        page=p["pageIndex"],
        warnings=_WARNINGS,
    ))


def _find_replace_text(p: dict) -> Code:
    if p["useGrep"]:
        find_prefs, change_prefs, method = "findGrepPreferences", "changeGrepPreferences", "changeGrep"
        options = None
    else:
        find_prefs, change_prefs, method = "findTextPreferences", "changeTextPreferences", "changeText"
        options = template(
            r"""
            app.findChangeTextOptions.caseSensitive = $CASE$;
            app.findChangeTextOptions.wholeWord = $WHOLE$;
            """,
            case=p["caseSensitive"],
            whole=p["wholeWord"],
        )

    if p["scope"] == "document":
        target = Code("var target = doc;")
    elif p["scope"] == "selection":
        target = template(
            r"""
            var target = null;
            if (app.selection.length > 0 && app.selection[0].hasOwnProperty($METHOD$)) {
                target = app.selection[0];
            }
            """,
            method=method,
        )
    else:
        target = Code(r"""
var target = null;
if (app.selection.length > 0 && app.selection[0].hasOwnProperty("parentStory")) {
    target = app.selection[0].parentStory;
}""".strip("\n"))

    return block(target, template(
        r"""
        if (target === null) {
            "Nothing selected to search in. Select text or a text frame first.";
        } else {
            app.findTextPreferences = NothingEnum.NOTHING;
            app.changeTextPreferences = NothingEnum.NOTHING;
            app.findGrepPreferences = NothingEnum.NOTHING;
            app.changeGrepPreferences = NothingEnum.NOTHING;
            $OPTIONS$
            app.$FIND_PREFS$.findWhat = $FIND$;
            app.$CHANGE_PREFS$.changeTo = $REPLACE$;
            var changed = target.$METHOD$();
            app.findTextPreferences = NothingEnum.NOTHING;
            app.changeTextPreferences = NothingEnum.NOTHING;
            app.findGrepPreferences = NothingEnum.NOTHING;
            app.changeGrepPreferences = NothingEnum.NOTHING;
            "Found and replaced " + changed.length + " instances of '" + $FIND$ + "' with '" + $REPLACE$ + "'";
        }
        """,
        options=options,
        find_prefs=Code(find_prefs),
        change_prefs=Code(change_prefs),
        find=p["findText"],
        replace=p["replaceText"],
        method=Code(method),
    ))


# ---------------------------------------------------------------------------
# Graphics management
# ---------------------------------------------------------------------------

def _place_image(p: dict) -> Code:
    if p["createFrame"]:
        if "width" in p and "height" in p:
            width, height = p["width"], p["height"]
        else:
            width = height = 50
        place = template(
            r"""
            var rect = page.rectangles.add();
            rect.geometricBounds = $BOUNDS$;
            rect.place(imageFile);
            """,
            bounds=_bounds(p["x"], p["y"], width, height),
        )
    else:
        place = template(
            r"""
            var placed = page.place(imageFile, [$X$, $Y$]);
            var rect = placed[0].parent;
            """,
            x=mm(p["x"]),
            y=mm(p["y"]),
        )

    return _on_page(p["pageIndex"], template(
        r"""
        var imageFile = File($PATH$);
        if (!imageFile.exists) {
            "Image file not found: " + $PATH$;
        } else {
            $PLACE$
            rect.fit($FIT$);
            "Image placed: " + imageFile.name + " on page " + ($INDEX$ + 1);
        }
        """,
        path=p["imagePath"],
        place=place,
        fit=enum_member("FitOptions", p["fitOption"]),
        index=p["pageIndex"],
    ))


def _stroke(target: str, p: dict) -> Code | None:
    if "strokeColor" not in p:
        return None
    return block(
        _set_color(target, "strokeColor", p["strokeColor"]),
        _assign(target, "strokeWeight", pt(p["strokeWidth"])),
    )


def _create_rectangle(p: dict) -> Code:
    corners = None
    if p["cornerRadius"] > 0:
        props = {f"{c}CornerOption": enum_member("CornerOptions", "ROUNDED_CORNER") for c in _CORNERS}
        props.update({f"{c}CornerRadius": mm(p["cornerRadius"]) for c in _CORNERS})
        corners = template("rect.properties = $PROPS$;", props=props)

    return _on_page(p["pageIndex"], template(
        r"""
        var warnings = [];
        var rect = page.rectangles.add();
        rect.geometricBounds = $BOUNDS$;
        $CORNERS$
        $FILL$
        $STROKE$
        "Rectangle created on page " + ($INDEX$ + 1) + " (" + $SIZE$ + ")" + $WARNINGS$;
        """,
        bounds=_bounds(p["x"], p["y"], p["width"], p["height"]),
        corners=corners,
        fill=_set_color("rect", "fillColor", p["fillColor"]) if "fillColor" in p else None,
        stroke=_stroke("rect", p),
        index=p["pageIndex"],
        size=_size_text(p["width"], p["height"]),
        warnings=_WARNINGS,
    ))


def _create_ellipse(p: dict) -> Code:
    return _on_page(p["pageIndex"], template(
        r"""
        var warnings = [];
        var ellipse = page.ovals.add();
        ellipse.geometricBounds = $BOUNDS$;
        $FILL$
        $STROKE$
        "Ellipse created on page " + ($INDEX$ + 1) + " (" + $SIZE$ + ")" + $WARNINGS$;
        """,
        bounds=_bounds(p["x"], p["y"], p["width"], p["height"]),
        fill=_set_color("ellipse", "fillColor", p["fillColor"]) if "fillColor" in p else None,
        stroke=_stroke("ellipse", p),
        index=p["pageIndex"],
        size=_size_text(p["width"], p["height"]),
        warnings=_WARNINGS,
    ))


# ---------------------------------------------------------------------------
# Style management
# ---------------------------------------------------------------------------

def _based_on(collection: str, target: str, base: str) -> Code:
    return template(
        r"""
        var base = doc.$COLLECTION$.itemByName($BASE$);
        if (base.isValid) {
            $TARGET$.basedOn = base;
        } else {
            warnings.push("base style " + $BASE$ + " not found");
        }
        """,
        collection=Code(collection),
        base=base,
        target=Code(target),
    )


def _new_style(collection: str, target: str, kind: str, name: str, settings: Code | None) -> Code:
    return template(
        r"""
        if (doc.$COLLECTION$.itemByName($NAME$).isValid) {
            $KIND$ + " '" + $NAME$ + "' already exists";
        } else {
            var warnings = [];
            var $TARGET$ = doc.$COLLECTION$.add({name: $NAME$});
            $SETTINGS$
            $KIND$ + " '" + $NAME$ + "' created successfully" + $WARNINGS$;
        }
        """,
        collection=Code(collection),
        name=name,
        kind=kind,
        target=Code(target),
        settings=settings,
        warnings=_WARNINGS,
    )


def _create_paragraph_style(p: dict) -> Code:
    settings = block(
        _based_on("paragraphStyles", "pStyle", p["baseStyle"]) if "baseStyle" in p else None,
        _set_font("pStyle", p["fontFamily"]) if "fontFamily" in p else None,
        _assign("pStyle", "pointSize", p["fontSize"]) if "fontSize" in p else None,
        _assign("pStyle", "leading", p["leading"]) if "leading" in p else None,
        _assign("pStyle", "spaceBefore", mm(p["spaceBefore"])) if "spaceBefore" in p else None,
        _assign("pStyle", "spaceAfter", mm(p["spaceAfter"])) if "spaceAfter" in p else None,
        _assign("pStyle", "justification", _justification(p["alignment"])) if "alignment" in p else None,
        _set_color("pStyle", "fillColor", p["textColor"]) if "textColor" in p else None,
    )
    return _new_style("paragraphStyles", "pStyle", "Paragraph style", p["name"], settings)


def _create_character_style(p: dict) -> Code:
    font = None
    if "fontFamily" in p:
        font = _set_font("cStyle", p["fontFamily"], p.get("fontStyle"))
    elif "fontStyle" in p:
        font = _assign("cStyle", "fontStyle", p["fontStyle"])
    settings = block(
        _based_on("characterStyles", "cStyle", p["baseStyle"]) if "baseStyle" in p else None,
        font,
        _assign("cStyle", "pointSize", p["fontSize"]) if "fontSize" in p else None,
        _assign("cStyle", "tracking", p["tracking"]) if "tracking" in p else None,
        _set_color("cStyle", "fillColor", p["textColor"]) if "textColor" in p else None,
    )
    return _new_style("characterStyles", "cStyle", "Character style", p["name"], settings)


def _check_apply_paragraph_style(p: dict):
    if ("startIndex" in p) != ("endIndex" in p):
        raise ValidationError("startIndex and endIndex must be given together")
    if "startIndex" in p and p["endIndex"] < p["startIndex"]:
        raise ValidationError("endIndex must not be smaller than startIndex")


def _apply_paragraph_style(p: dict) -> Code:
    if "startIndex" in p:
        apply = template(
            "textFrame.parentStory.characters.itemByRange($START$, $END$).paragraphs.everyItem().appliedParagraphStyle = style;",
            start=p["startIndex"],
            end=p["endIndex"],
        )
    else:
        apply = Code("textFrame.parentStory.paragraphs.everyItem().appliedParagraphStyle = style;")

    return _text_frame_on_page(p["pageIndex"], p["frameIndex"], template(
        r"""
        var style = doc.paragraphStyles.itemByName($STYLE$);
        if (!style.isValid) {
            "Paragraph style '" + $STYLE$ + "' not found";
        } else {
            $APPLY$
            "Paragraph style '" + $STYLE$ + "' applied to text frame " + $FRAME$;
        }
        """,
        style=p["styleName"],
        apply=apply,
        frame=p["frameIndex"],
    ))


_STYLE_SECTIONS = (
    ("paragraph", "PARAGRAPH STYLES", "paragraphStyles"),
    ("character", "CHARACTER STYLES", "characterStyles"),
    ("object", "OBJECT STYLES", "objectStyles"),
)


def _list_styles(p: dict) -> Code:
    sections = []
    for kind, heading, collection in _STYLE_SECTIONS:
        if p["styleType"] not in ("all", kind):
            continue
        sections.append(template(
            r"""
            result += $HEADING$ + " (" + doc.$COLLECTION$.length + "):\n";
            for (var i = 0; i < doc.$COLLECTION$.length; i++) {
                result += "  \u2022 " + doc.$COLLECTION$[i].name + "\n";
            }
            result += "\n";
            """,
            heading=heading,
            collection=Code(collection),
        ))
    return template(
        r"""
        var result = "=== DOCUMENT STYLES ===\n\n";
        $SECTIONS$
        result;
        """,
        sections=block(*sections),
    )


# ---------------------------------------------------------------------------
# Color management
# ---------------------------------------------------------------------------

_COLOR_COMPONENTS = {"CMYK": 4, "RGB": 3, "LAB": 3}


def _check_color_swatch(p: dict):
    expected = _COLOR_COMPONENTS[p["colorModel"]]
    if len(p["colorValues"]) != expected:
        raise ValidationError(
            f"colorValues must have {expected} values for {p['colorModel']}, got {len(p['colorValues'])}"
        )


def _create_color_swatch(p: dict) -> Code:
    values = p["colorValues"]
    properties = {
        "name": p["name"],
        "model": enum_member("ColorModel", "SPOT" if p["spotColor"] else "PROCESS"),
        "space": enum_member("ColorSpace", p["colorModel"]),
        "colorValue": values,
    }
    summary = f"{p['colorModel']}: {', '.join(number(v) for v in values)}"
    return template(
        r"""
        if (doc.colors.itemByName($NAME$).isValid) {
            "Color swatch '" + $NAME$ + "' already exists";
        } else {
            var newColor = doc.colors.add($PROPERTIES$);
            "Color swatch '" + newColor.name + "' created (" + $SUMMARY$ + ")";
        }
        """,
        name=p["name"],
        properties=properties,
        summary=summary,
    )


def _list_color_swatches(p: dict) -> Code:
    return Code(r"""
var swatches = doc.swatches.everyItem().getElements();
var result = "=== COLOR SWATCHES ===\n\n";
result += "TOTAL SWATCHES: " + swatches.length + "\n\n";
for (var i = 0; i < swatches.length; i++) {
    var swatch = swatches[i];
    result += "\u2022 " + swatch.name;
    if (swatch instanceof Color) {
        result += " (" + swatch.space + ", " + swatch.model + ")";
    }
    result += "\n";
}
result;""".strip("\n"))


def _apply_color(p: dict) -> Code:
    return _on_page(p["pageIndex"], template(
        r"""
        var items = page.allPageItems;
        if ($OBJECT$ >= items.length) {
            "Invalid object index: " + $OBJECT$ + ". Page has " + items.length + " objects.";
        } else {
            var swatch = doc.swatches.itemByName($SWATCH$);
            if (!swatch.isValid) {
                "Color swatch '" + $SWATCH$ + "' not found";
            } else {
                items[$OBJECT$].$PROP$ = swatch;
                "Color '" + $SWATCH$ + "' applied to " + $PROPERTY$ + " of object " + $OBJECT$;
            }
        }
        """,
        object=p["objectIndex"],
        swatch=p["swatchName"],
        prop=Code("fillColor" if p["property"] == "fill" else "strokeColor"),
        property=p["property"],
    ))


# ---------------------------------------------------------------------------
# Table management
# ---------------------------------------------------------------------------

def _check_create_table(p: dict):
    if p["headerRows"] + p["footerRows"] >= p["rows"]:
        raise ValidationError("headerRows + footerRows must leave at least one body row")


def _create_table(p: dict) -> Code:
    return _on_page(p["pageIndex"], template(
        r"""
        var textFrame = page.textFrames.add();
        textFrame.geometricBounds = $BOUNDS$;
        var table = textFrame.tables.add();
        table.rowCount = $ROWS$;
        table.columnCount = $COLUMNS$;
        $HEADER$
        $FOOTER$
        "Table created with " + $ROWS$ + " rows and " + $COLUMNS$ + " columns on page " + ($INDEX$ + 1);
        """,
        bounds=_bounds(p["x"], p["y"], p["width"], p["height"]),
        rows=p["rows"],
        columns=p["columns"],
        header=_assign("table", "headerRowCount", p["headerRows"]) if p["headerRows"] > 0 else None,
        footer=_assign("table", "footerRowCount", p["footerRows"]) if p["footerRows"] > 0 else None,
        index=p["pageIndex"],
    ))


def _populate_table(p: dict) -> Code:
    data = [[_cell_text(cell) for cell in row] for row in p["data"]]
    return _on_page(p["pageIndex"], template(
        r"""
        var tables = [];
        for (var i = 0; i < page.textFrames.length; i++) {
            for (var j = 0; j < page.textFrames[i].tables.length; j++) {
                tables.push(page.textFrames[i].tables[j]);
            }
        }
        if ($TABLE$ >= tables.length) {
            "Table index " + $TABLE$ + " not found. Page has " + tables.length + " tables.";
        } else {
            var table = tables[$TABLE$];
            var data = $DATA$;
            var firstRow = $FIRST_ROW$;
            var written = 0;
            for (var r = 0; r < data.length && firstRow + r < table.rows.length; r++) {
                var row = table.rows[firstRow + r];
                for (var c = 0; c < data[r].length && c < row.cells.length; c++) {
                    row.cells[c].contents = data[r][c];
                }
                written++;
            }
            "Table populated with " + written + " rows of data";
        }
        """,
        table=p["tableIndex"],
        data=data,
        first_row=Code("0") if p["includeHeaders"] else Code("table.headerRowCount"),
    ))


# ---------------------------------------------------------------------------
# Layer management
# ---------------------------------------------------------------------------

def _create_layer(p: dict) -> Code:
    color = None
    if "color" in p:
        key = re.sub(r"[\s-]+", "_", p["color"].strip()).upper()
        color = template(
            r"""
            try {
                layer.layerColor = UIColors[$KEY$];
            } catch (e) {
                warnings.push("layer color " + $COLOR$ + ": " + e.message);
            }
            """,
            key=key,
            color=p["color"],
        )
    return template(
        r"""
        if (doc.layers.itemByName($NAME$).isValid) {
            "Layer '" + $NAME$ + "' already exists";
        } else {
            var warnings = [];
            var layer = doc.layers.add({name: $NAME$});
            $COLOR$
            layer.visible = $VISIBLE$;
            layer.locked = $LOCKED$;
            "Layer '" + $NAME$ + "' created successfully" + $WARNINGS$;
        }
        """,
        name=p["name"],
        color=color,
        visible=p["visible"],
        locked=p["locked"],
        warnings=_WARNINGS,
    )


def _set_active_layer(p: dict) -> Code:
    return template(
        r"""
        var layer = doc.layers.itemByName($NAME$);
        if (layer.isValid) {
            doc.activeLayer = layer;
            "Active layer set to: " + $NAME$;
        } else {
            "Layer '" + $NAME$ + "' not found";
        }
        """,
        name=p["layerName"],
    )


def _list_layers(p: dict) -> Code:
    return Code(r"""
var result = "=== DOCUMENT LAYERS ===\n\n";
var activeId = doc.activeLayer.id;
for (var i = 0; i < doc.layers.length; i++) {
    var layer = doc.layers[i];
    result += "\u2022 " + layer.name;
    result += " (Visible: " + layer.visible + ", Locked: " + layer.locked + ")";
    if (layer.id === activeId) {
        result += " [ACTIVE]";
    }
    result += "\n";
}
result;""".strip("\n"))


# ---------------------------------------------------------------------------
# Export & print
# ---------------------------------------------------------------------------

_JPEG_QUALITY = {"Low": "LOW", "Medium": "MEDIUM", "High": "HIGH", "Maximum": "MAXIMUM"}


def _check_page_range(p: dict):
    _parse_ranges("pageRange", p["pageRange"])


def _export_pdf(p: dict) -> Code:
    ranges = _parse_ranges("pageRange", p["pageRange"])
    if ranges is None:
        page_range = enum_member("PageRange", "ALL_PAGES")
    else:
        page_range = _range_text(ranges)
    profile = None
    if "colorProfile" in p:
        profile = template(
            r"""
            app.pdfExportPreferences.pdfColorSpace = PDFColorSpace.REPURPOSE_CMYK;
            app.pdfExportPreferences.pdfDestinationProfile = $PROFILE$;
            """,
            profile=p["colorProfile"],
        )
    return template(
        r"""
        var pdfFile = File($PATH$);
        var pdfPreset = app.pdfExportPresets.itemByName($PRESET$);
        if (!pdfPreset.isValid) {
            pdfPreset = app.pdfExportPresets[0];
        }
        app.pdfExportPreferences.pageRange = $PAGE_RANGE$;
        app.pdfExportPreferences.useDocumentBleedWithPDF = $BLEED$;
        app.pdfExportPreferences.includeSlugWithPDF = $SLUG$;
        app.pdfExportPreferences.colorBitmapQuality = $QUALITY$;
        $PROFILE$
        doc.exportFile(ExportFormat.PDF_TYPE, pdfFile, false, pdfPreset);
        "PDF exported successfully to: " + pdfFile.fsName + " (preset " + pdfPreset.name + ")";
        """,
        path=p["filePath"],
        preset=_PDF_PRESETS[p["preset"]],
        page_range=page_range,
        bleed=p["includeBleed"],
        slug=p["includeSlug"],
        quality=enum_member("CompressionQuality", _JPEG_QUALITY[p["jpegQuality"]]),
        profile=profile,
    )


_IMAGE_FORMATS = {
    "PNG": ("PNG_FORMAT", ".png", "pngExportPreferences", "pngExportRange", "PNGExportRangeEnum"),
    "JPEG": ("JPG", ".jpg", "jpegExportPreferences", "jpegExportRange", "ExportRangeOrAllPages"),
}


def _export_images(p: dict) -> Code:
    requested = p["format"]
    actual = requested if requested in _IMAGE_FORMATS else "PNG"
    export_format, extension, prefs, range_prop, range_enum = _IMAGE_FORMATS[actual]
    note = "" if actual == requested else f" ({requested} is not supported for page export)"

    ranges = _parse_ranges("pageRange", p["pageRange"])
    if ranges is None:
        page_ranges = Code("[[0, doc.pages.length - 1]]")
    else:
        page_ranges = [[start - 1, end - 1] for start, end in ranges]

    return template(
        r"""
        var exportFolder = Folder($FOLDER$);
        if (!exportFolder.exists) {
            exportFolder.create();
        }
        var ranges = $RANGES$;
        var pages = [];
        for (var r = 0; r < ranges.length; r++) {
            for (var i = ranges[r][0]; i <= ranges[r][1] && i < doc.pages.length; i++) {
                pages.push(doc.pages[i]);
            }
        }
        var prefs = app.$PREFS$;
        prefs.$RANGE_PROP$ = $EXPORT_RANGE$;
        prefs.exportResolution = $RESOLUTION$;
        prefs.useDocumentBleeds = $BLEED$;
        var baseName = doc.name.replace(/\.indd$/i, "");
        for (var i = 0; i < pages.length; i++) {
            var pageNumber = pages[i].documentOffset + 1;
            prefs.pageString = "+" + pageNumber;
            doc.exportFile($FORMAT$, File(exportFolder.fsName + "/" + baseName + "_page" + pageNumber + $EXTENSION$));
        }
        "Exported " + pages.length + " pages as " + $ACTUAL$ + " files to: " + exportFolder.fsName + $NOTE$;
        """,
        folder=p["folderPath"],
        ranges=page_ranges,
        prefs=Code(prefs),
        range_prop=Code(range_prop),
        export_range=enum_member(range_enum, "EXPORT_RANGE"),
        resolution=p["resolution"],
        bleed=p["includeBleed"],
        format=enum_member("ExportFormat", export_format),
        extension=extension,
        actual=actual,
        note=note,
    )


def _export_epub(p: dict) -> Code:
    if p["includeImages"]:
        images = block(
            Code("prefs.imageConversion = ImageConversion.AUTOMATIC;"),
            Code("prefs.pngQualityLevel = PNGQualityLevel.HIGH;") if p["imageFormat"] == "PNG" else None,
            Code("prefs.jpegOptionsQuality = JPEGOptionsQuality.HIGH;") if p["imageFormat"] == "JPEG" else None,
        )
    else:
        images = Code("prefs.imageConversion = ImageConversion.LINK_TO_SERVER;")
    return template(
        r"""
        var epubFile = File($PATH$);
        var prefs = app.epubExportPreferences;
        prefs.epubVersion = $VERSION$;
        prefs.preserveLocalOverride = true;
        $IMAGES$
        doc.exportFile(ExportFormat.EPUB, epubFile);
        "EPUB exported successfully to: " + epubFile.fsName;
        """,
        path=p["filePath"],
        version=enum_member("EPubVersion", "EPUB_VERSION_3" if p["version"] == "EPUB3" else "EPUB_VERSION_2"),
        images=images,
    )


def _package_document(p: dict) -> Code:
    return template(
        r"""
        var packageFolder = Folder($FOLDER$);
        if (!packageFolder.exists) {
            packageFolder.create();
        }
        var packaged = doc.packageForPrint(packageFolder, $FONTS$, $LINKS$, true, true, true, true, $REPORT$);
        packaged ? "Document packaged successfully to: " + packageFolder.fsName : "Packaging did not complete for: " + packageFolder.fsName;
        """,
        folder=p["folderPath"],
        fonts=p["includeFonts"],
        links=p["includeLinkedFiles"],
        report=p["createReport"],
    )


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

def _execute_indesign_code(p: dict) -> Code:
    return Code(p["code"])


def _preflight_document(p: dict) -> Code:
    if "profile" in p:
        profile = template(
            r"""
            var profile = app.preflightProfiles.itemByName($PROFILE$);
            if (!profile.isValid) {
                profile = app.preflightProfiles[0];
            }
            """,
            profile=p["profile"],
        )
    else:
        profile = Code("var profile = app.preflightProfiles[0];")
    note = ""
    if p["scope"] == "selection":
        note = " Scope 'selection' is not supported; the whole document was checked."
    return block(profile, template(
        r"""
        var process = app.preflightProcesses.add(doc, profile);
        process.waitForProcess();
        var results = process.aggregatedResults;
        var issueCount = results[2] ? results[2].length : 0;
        process.remove();
        "Preflight check completed with profile '" + profile.name + "'. Found " + issueCount + " issues." + $NOTE$;
        """,
        note=note,
    ))


def _view_document(p: dict) -> Code:
    return Code(r"""
var info = "=== DOCUMENT VIEW ===\n";
info += "Document: " + doc.name + "\n";
info += "Current Page: " + (app.activeWindow.activePage ? (app.activeWindow.activePage.documentOffset + 1) : "None") + " of " + doc.pages.length + "\n";
info += "Zoom Level: " + Math.round(app.activeWindow.zoomPercentage) + "%\n";
info += "View: " + app.activeWindow.viewDisplaySetting + "\n";
try {
    var currentPage = app.activeWindow.activePage || doc.pages[0];
    info += "\n=== CURRENT PAGE CONTENT ===\n";
    info += "Text Frames: " + currentPage.textFrames.length + "\n";
    info += "Images/Rectangles: " + currentPage.rectangles.length + "\n";
    info += "Ellipses: " + currentPage.ovals.length + "\n";
    info += "Groups: " + currentPage.groups.length + "\n";
    info += "Total Objects: " + currentPage.allPageItems.length;
} catch (e) {
    info += "\nCould not analyze page content: " + e.message;
}
info;""".strip("\n"))


# ZoomOptions has no selection fit; it falls back to the page.
_ZOOM = {
    "FIT_PAGE": "FIT_PAGE",
    "FIT_SPREAD": "FIT_SPREAD",
    "ACTUAL_SIZE": "ACTUAL_SIZE",
    "ZOOM_TO_SELECTION": "FIT_PAGE",
}


def _zoom_to_page(p: dict) -> Code:
    navigate = None
    page_note = ""
    if "pageIndex" in p:
        navigate = template(
            r"""
            if ($INDEX$ < doc.pages.length) {
                app.activeWindow.activePage = doc.pages[$INDEX$];
            }
            """,
            index=p["pageIndex"],
        )
        page_note = f" on page {p['pageIndex'] + 1}"
    return template(
        r"""
        $NAVIGATE$
        app.activeWindow.zoom($ZOOM$);
        "Zoom applied: " + $APPLIED$;
        """,
        navigate=navigate,
        zoom=enum_member("ZoomOptions", _ZOOM[p["fitOption"]]),
        applied=_ZOOM[p["fitOption"]] + page_note,
    )


def _check_data_merge(p: dict):
    _parse_ranges("recordRange", p["recordRange"])


def _data_merge(p: dict) -> Code:
    ranges = _parse_ranges("recordRange", p["recordRange"])
    if ranges is None:
        records = Code("prefs.recordSelection = RecordSelection.ALL_RECORDS;")
    else:
        records = template(
            r"""
            prefs.recordSelection = RecordSelection.RANGE;
            prefs.recordRange = $RANGE$;
            """,
            range=_range_text(ranges),
        )
    export_pdf = None
    if p["fileFormat"] in ("PDF", "BOTH"):
        export_pdf = Code(r"""
var pdfFile = File(outputDir.fsName + "/" + baseName + ".pdf");
dmp.exportFile(pdfFile, app.pdfExportPresets[0]);
written.push(pdfFile.name);""".strip("\n"))
    export_indd = None
    if p["fileFormat"] in ("INDD", "BOTH"):
        export_indd = Code(r"""
dmp.mergeRecords();
var merged = app.activeDocument;
var inddFile = File(outputDir.fsName + "/" + baseName + ".indd");
merged.save(inddFile);
merged.close(SaveOptions.NO);
written.push(inddFile.name);""".strip("\n"))

    return template(
        r"""
        var dataSource = File($SOURCE$);
        if (!dataSource.exists) {
            "Data source file not found: " + $SOURCE$;
        } else {
            var dmp = doc.dataMergeProperties;
            dmp.selectDataSource(dataSource);
            var prefs = dmp.dataMergePreferences;
            $RECORDS$
            var outputDir = Folder($OUTPUT$);
            if (!outputDir.exists) {
                outputDir.create();
            }
            var baseName = doc.name.replace(/\.indd$/i, "") + "_merged";
            var written = [];
            $EXPORT_PDF$
            $EXPORT_INDD$
            "Data merge completed. Files saved to: " + outputDir.fsName + " (" + written.join(", ") + ")";
        }
        """,
        source=p["dataSourcePath"],
        records=records,
        output=p["outputFolder"],
        export_pdf=export_pdf,
        export_indd=export_indd,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_XY = (
    _length("x", "X position in mm", default=10),
    _length("y", "Y position in mm", default=10),
)

_SHAPE = (
    _length("x", "X position in mm", required=True),
    _length("y", "Y position in mm", required=True),
    _length("width", "Width in mm", required=True),
    _length("height", "Height in mm", required=True),
    _page_index("Page index"),
)

CATALOG: tuple[Operation, ...] = (
    # Document management
    Operation(
        "get_document_info", "Document Info", "Document",
        "Get detailed information about the current InDesign document",
        _get_document_info,
        no_document=NO_DOCUMENT,
    ),
    Operation(
        "create_document", "Create Document", "Document",
        "Create a new InDesign document with advanced options",
        _create_document,
        params=(
            _text("preset", "Document preset (A3, A4, A5, Letter, Legal or Custom)", default="A4",
                  enum=("A3", "A4", "A5", "Letter", "Legal", "Custom")),
            _length("width", "Document width in mm (for custom preset)"),
            _length("height", "Document height in mm (for custom preset)"),
            _text("orientation", "Page orientation", default="Portrait", enum=("Portrait", "Landscape")),
            Param("pages", "integer", "Number of pages", default=1, minimum=1),
            _flag("facingPages", "Enable facing pages", False),
            _length("bleed", "Bleed in mm", default=0),
            _length("slug", "Slug area in mm", default=0),
            _length("marginTop", "Top margin in mm", default=20),
            _length("marginBottom", "Bottom margin in mm", default=20),
            _length("marginLeft", "Left margin in mm", default=20),
            _length("marginRight", "Right margin in mm", default=20),
        ),
        check=_check_create_document,
    ),
    Operation(
        "open_document", "Open Document", "Document",
        "Open an existing InDesign document",
        _open_document,
        params=(_text("filePath", "Path to the InDesign document (.indd)", required=True),),
    ),
    Operation(
        "save_document", "Save Document", "Document",
        "Save the current document",
        _save_document,
        params=(_text("filePath", "Optional: Save as new file path"),),
        no_document="No document open to save",
    ),
    Operation(
        "close_document", "Close Document", "Document",
        "Close the current document",
        _close_document,
        params=(_flag("save", "Save before closing", False),),
        no_document="No document open to close",
    ),

    # Page management
    Operation(
        "add_page", "Add Page", "Pages",
        "Add a new page to the document",
        _add_page,
        params=(
            _text("position", "Where to add the page", default="end", enum=("before", "after", "end")),
            _page_index("Reference page index (for before/after)", default=None),
            _text("masterPage", "Master page to apply"),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "delete_page", "Delete Page", "Pages",
        "Delete a page from the document",
        _delete_page,
        params=(_page_index("Page index to delete", required=True),),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "duplicate_page", "Duplicate Page", "Pages",
        "Duplicate a page",
        _duplicate_page,
        params=(
            _page_index("Page index to duplicate", required=True),
            _text("position", "Where to put the copy", default="after", enum=("before", "after", "end")),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "navigate_to_page", "Navigate to Page", "Pages",
        "Navigate to a specific page",
        _navigate_to_page,
        params=(_page_index("Page index to navigate to", required=True),),
        no_document=NO_DOCUMENT,
    ),

    # Text management
    Operation(
        "create_text_frame", "Create Text Frame", "Text",
        "Create a text frame with advanced formatting options",
        _create_text_frame,
        params=(
            _text("content", "Text content for the frame", required=True),
            *_XY,
            _length("width", "Width in mm", default=100),
            _length("height", "Height in mm", default=50),
            _page_index(),
            Param("fontSize", "number", "Font size in points", default=12),
            _text("fontFamily", "Font family name", default="Helvetica Neue"),
            _text("fontStyle", "Font style (Regular, Bold, Italic, etc.)", default="Regular"),
            _text("textColor", "Text color (#RRGGBB or swatch name)", default="Black"),
            _text("alignment", "Paragraph alignment", default="LEFT_ALIGN", enum=ALIGNMENTS),
            _text("paragraphStyle", "Paragraph style name to apply"),
            _text("characterStyle", "Character style name to apply"),
        ),
        no_document=NO_DOCUMENT_CREATE_FIRST,
        undoable=True,
    ),
    Operation(
        "edit_text_frame", "Edit Text Frame", "Text",
        "Edit properties of an existing text frame",
        _edit_text_frame,
        params=(
            Param("frameIndex", "integer", "Text frame index on page", required=True, minimum=0),
            _page_index("Page index"),
            _text("content", "New text content"),
            Param("fontSize", "number", "Font size in points"),
            _text("fontFamily", "Font family name"),
            _text("textColor", "Text color (#RRGGBB or swatch name)"),
            _text("alignment", "Paragraph alignment", enum=ALIGNMENTS),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "find_replace_text", "Find/Replace Text", "Text",
        "Find and replace text in the document",
        _find_replace_text,
        params=(
            _text("findText", "Text to find", required=True),
            _text("replaceText", "Replacement text", required=True),
            _flag("caseSensitive", "Case sensitive search", False),
            _flag("wholeWord", "Whole word only", False),
            _flag("useGrep", "Use GREP (regular expressions)", False),
            _text("scope", "Search scope; story means the story of the current selection",
                  default="document", enum=("document", "story", "selection")),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),

    # Graphics management
    Operation(
        "place_image", "Place Image", "Graphics",
        "Place an image with advanced options",
        _place_image,
        params=(
            _text("imagePath", "Path to the image file", required=True),
            *_XY,
            _length("width", "Width in mm (a 50mm frame is used unless width and height are both given)"),
            _length("height", "Height in mm (a 50mm frame is used unless width and height are both given)"),
            _page_index("Page index"),
            _text("fitOption", "How to fit the image", default="PROPORTIONALLY",
                  enum=("PROPORTIONALLY", "FRAME_TO_CONTENT", "CONTENT_TO_FRAME", "CENTER_CONTENT")),
            _flag("createFrame", "Create frame first", True),
        ),
        no_document=NO_DOCUMENT_CREATE_FIRST,
        undoable=True,
    ),
    Operation(
        "create_rectangle", "Create Rectangle", "Graphics",
        "Create a rectangle shape",
        _create_rectangle,
        params=(
            *_SHAPE,
            _text("fillColor", "Fill color (#RRGGBB or swatch name)"),
            _text("strokeColor", "Stroke color"),
            Param("strokeWidth", "number", "Stroke width in points", default=1, minimum=0),
            Param("cornerRadius", "number", "Corner radius in mm", default=0, minimum=0),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "create_ellipse", "Create Ellipse", "Graphics",
        "Create an ellipse shape",
        _create_ellipse,
        params=(
            *_SHAPE,
            _text("fillColor", "Fill color (#RRGGBB or swatch name)"),
            _text("strokeColor", "Stroke color"),
            Param("strokeWidth", "number", "Stroke width in points", default=1, minimum=0),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),

    # Style management
    Operation(
        "create_paragraph_style", "Create Paragraph Style", "Styles",
        "Create a new paragraph style",
        _create_paragraph_style,
        params=(
            _text("name", "Style name", required=True),
            _text("fontFamily", "Font family"),
            Param("fontSize", "number", "Font size in points"),
            Param("leading", "number", "Leading (line spacing) in points"),
            _length("spaceBefore", "Space before paragraph in mm"),
            _length("spaceAfter", "Space after paragraph in mm"),
            _text("alignment", "Paragraph alignment", enum=ALIGNMENTS),
            _text("textColor", "Text color"),
            _text("baseStyle", "Base style to inherit from"),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "create_character_style", "Create Character Style", "Styles",
        "Create a new character style",
        _create_character_style,
        params=(
            _text("name", "Style name", required=True),
            _text("fontFamily", "Font family"),
            _text("fontStyle", "Font style (Regular, Bold, Italic)"),
            Param("fontSize", "number", "Font size in points"),
            _text("textColor", "Text color"),
            Param("tracking", "number", "Character tracking"),
            _text("baseStyle", "Base style to inherit from"),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "apply_paragraph_style", "Apply Paragraph Style", "Styles",
        "Apply a paragraph style to text",
        _apply_paragraph_style,
        params=(
            _text("styleName", "Paragraph style name", required=True),
            Param("frameIndex", "integer", "Text frame index", required=True, minimum=0),
            _page_index("Page index"),
            Param("startIndex", "integer", "Start character index (optional)", minimum=0),
            Param("endIndex", "integer", "End character index (optional)", minimum=0),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
        check=_check_apply_paragraph_style,
    ),
    Operation(
        "list_styles", "List Styles", "Styles",
        "List all available styles in the document",
        _list_styles,
        params=(
            _text("styleType", "Which styles to list", default="all",
                  enum=("paragraph", "character", "object", "all")),
        ),
        no_document=NO_DOCUMENT,
    ),

    # Color management
    Operation(
        "create_color_swatch", "Create Color Swatch", "Color",
        "Create a new color swatch",
        _create_color_swatch,
        params=(
            _text("name", "Swatch name", required=True),
            _text("colorModel", "Color space of colorValues", default="CMYK", enum=("CMYK", "RGB", "LAB")),
            Param("colorValues", "array", "Color values array [C,M,Y,K], [R,G,B] or [L,a,b]",
                  required=True, items={"type": "number"}),
            _flag("spotColor", "Create as spot color", False),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
        check=_check_color_swatch,
    ),
    Operation(
        "list_color_swatches", "List Color Swatches", "Color",
        "List all color swatches in the document",
        _list_color_swatches,
        no_document=NO_DOCUMENT,
    ),
    Operation(
        "apply_color", "Apply Color", "Color",
        "Apply color to an object",
        _apply_color,
        params=(
            Param("objectIndex", "integer", "Object index on page", required=True, minimum=0),
            _page_index("Page index"),
            _text("swatchName", "Color swatch name", required=True),
            _text("property", "Which color to set", default="fill", enum=("fill", "stroke")),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),

    # Table management
    Operation(
        "create_table", "Create Table", "Tables",
        "Create a table",
        _create_table,
        params=(
            _length("x", "X position in mm", required=True),
            _length("y", "Y position in mm", required=True),
            _length("width", "Table width in mm", required=True),
            _length("height", "Table height in mm", required=True),
            Param("rows", "integer", "Number of rows", required=True, minimum=1),
            Param("columns", "integer", "Number of columns", required=True, minimum=1),
            _page_index("Page index"),
            Param("headerRows", "integer", "Number of header rows", default=1, minimum=0),
            Param("footerRows", "integer", "Number of footer rows", default=0, minimum=0),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
        check=_check_create_table,
    ),
    Operation(
        "populate_table", "Populate Table", "Tables",
        "Populate table with data",
        _populate_table,
        params=(
            Param("tableIndex", "integer", "Table index on page", required=True, minimum=0),
            _page_index("Page index"),
            Param("data", "array", "Array of arrays with table data", required=True,
                  items={"type": "array"}),
            _flag("includeHeaders", "First row of data fills the header row", True),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),

    # Layer management
    Operation(
        "create_layer", "Create Layer", "Layers",
        "Create a new layer",
        _create_layer,
        params=(
            _text("name", "Layer name", required=True),
            _text("color", "Layer color for guides (UI color name, e.g. LIGHT_BLUE)"),
            _flag("visible", "Layer visibility", True),
            _flag("locked", "Layer locked state", False),
        ),
        no_document=NO_DOCUMENT,
        undoable=True,
    ),
    Operation(
        "set_active_layer", "Set Active Layer", "Layers",
        "Set the active layer",
        _set_active_layer,
        params=(_text("layerName", "Layer name to activate", required=True),),
        no_document=NO_DOCUMENT,
    ),
    Operation(
        "list_layers", "List Layers", "Layers",
        "List all layers in the document",
        _list_layers,
        no_document=NO_DOCUMENT,
    ),

    # Export & print
    Operation(
        "export_pdf", "Export PDF", "Export",
        "Export document as PDF with advanced options",
        _export_pdf,
        params=(
            _text("filePath", "Output PDF file path", required=True),
            _text("preset", "PDF export preset", default="HighQualityPrint",
                  enum=("Print", "Web", "SmallestFileSize", "HighQualityPrint", "PressQuality")),
            _text("pageRange", 'Page range (e.g., "1-5", "all")', default="all"),
            _flag("includeBleed", "Include bleed area", False),
            _flag("includeSlug", "Include slug area", False),
            _text("colorProfile", "Destination color profile for export"),
            _text("jpegQuality", "Image compression quality", default="High",
                  enum=("Low", "Medium", "High", "Maximum")),
        ),
        no_document=NO_DOCUMENT_CREATE_FIRST,
        long_running=True,
        check=_check_page_range,
    ),
    Operation(
        "export_images", "Export Images", "Export",
        "Export pages as images",
        _export_images,
        params=(
            _text("folderPath", "Output folder path", required=True),
            _text("format", "Image format (TIFF and GIF fall back to PNG)", default="PNG",
                  enum=("PNG", "JPEG", "TIFF", "GIF")),
            Param("resolution", "number", "Export resolution in DPI", default=300, minimum=1),
            _text("pageRange", "Page range", default="all"),
            _flag("includeBleed", "Include bleed area", False),
        ),
        no_document=NO_DOCUMENT,
        long_running=True,
        check=_check_page_range,
    ),
    Operation(
        "export_epub", "Export EPUB", "Export",
        "Export document as EPUB",
        _export_epub,
        params=(
            _text("filePath", "Output EPUB file path", required=True),
            _text("version", "EPUB version", default="EPUB3", enum=("EPUB2", "EPUB3")),
            _flag("includeImages", "Include images", True),
            _text("imageFormat", "Image format", default="PNG", enum=("PNG", "JPEG", "GIF")),
        ),
        no_document=NO_DOCUMENT,
        long_running=True,
    ),
    Operation(
        "package_document", "Package Document", "Export",
        "Package document for print production",
        _package_document,
        params=(
            _text("folderPath", "Output folder path", required=True),
            _flag("includeLinkedFiles", "Include linked files", True),
            _flag("includeFonts", "Include fonts", True),
            _flag("createReport", "Create packaging report", True),
        ),
        no_document=NO_DOCUMENT,
        long_running=True,
    ),

    # Utilities
    Operation(
        "execute_indesign_code", "Execute Custom Code", "Utilities",
        "Execute custom ExtendScript code in InDesign. The value of the last "
        "expression is returned; exceptions are reported with their line number.",
        _execute_indesign_code,
        params=(_text("code", "ExtendScript/JavaScript code to execute in InDesign", required=True),),
        undoable=True,
    ),
    Operation(
        "preflight_document", "Preflight Document", "Utilities",
        "Run preflight check on the document",
        _preflight_document,
        params=(
            _text("profile", "Preflight profile name"),
            _text("scope", "What to check", default="document", enum=("document", "selection")),
        ),
        no_document=NO_DOCUMENT,
        long_running=True,
    ),
    Operation(
        "view_document", "Document View", "Utilities",
        "Get visual representation and detailed info about the current document",
        _view_document,
        no_document=NO_DOCUMENT,
    ),
    Operation(
        "zoom_to_page", "Zoom to Page", "Utilities",
        "Zoom and fit page in view",
        _zoom_to_page,
        params=(
            _page_index("Page index to zoom to", default=None),
            _text("fitOption", "Zoom mode (ZOOM_TO_SELECTION fits the page)", default="FIT_PAGE",
                  enum=("FIT_PAGE", "FIT_SPREAD", "ACTUAL_SIZE", "ZOOM_TO_SELECTION")),
        ),
        no_document=NO_DOCUMENT,
    ),
    Operation(
        "data_merge", "Data Merge", "Utilities",
        "Perform data merge operation",
        _data_merge,
        params=(
            _text("dataSourcePath", "Path to CSV data source", required=True),
            _text("outputFolder", "Output folder for merged documents", required=True),
            _text("fileFormat", "What to produce", default="PDF", enum=("INDD", "PDF", "BOTH")),
            _text("recordRange", 'Record range (e.g., "1-10", "all")', default="all"),
        ),
        no_document=NO_DOCUMENT,
        long_running=True,
        check=_check_data_merge,
    ),
)

OPERATIONS: dict[str, Operation] = {op.name: op for op in CATALOG}


def get(name: str) -> Operation | None:
    return OPERATIONS.get(name)
