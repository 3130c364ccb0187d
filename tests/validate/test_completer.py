"""
Tests for the schema validator/completer.
"""

import math

import pytest

from drapekit.core.errors import MissingSteps
from drapekit.ir.enums import Area, Icon
from drapekit.validate import DocumentCompleter, validate_document
from drapekit.validate.completer import coerce_difficulty, coerce_enum, truncate_name


def doc_with(**fields):
    doc = {"steps": [{"title": "a"}]}
    doc.update(fields)
    return doc


class TestSteps:
    """The step list is the one hard gate."""

    @pytest.mark.parametrize("steps", [[], None, "steps", 42, [1, None, True]])
    def test_unusable_steps_raise(self, domain, steps):
        with pytest.raises(MissingSteps):
            validate_document({"designName": "裙", "steps": steps}, domain)

    def test_missing_steps_key_raises(self, domain):
        with pytest.raises(MissingSteps):
            validate_document({"designName": "裙"}, domain)

    def test_non_object_raises(self, domain):
        with pytest.raises(MissingSteps):
            validate_document(["not", "an", "object"], domain)

    def test_string_entries_become_titles(self, domain):
        doc = validate_document({"steps": ["  铺布  ", {"desc": "x"}]}, domain)

        assert doc.steps[0].title == "铺布"
        assert doc.steps[1].title == "步骤2"

    def test_non_object_entries_are_dropped(self, domain):
        completion = DocumentCompleter(domain).complete({"steps": [{"title": "a"}, 7]})

        assert len(completion.document.steps) == 1
        assert "STEP_ENTRIES_DROPPED" in [n.code for n in completion.notes]

    def test_enum_repair(self, domain):
        doc = validate_document(
            {"steps": [
                {"title": "a", "icon": "  Scissors ", "area": "WAIST"},
                {"title": "b", "icon": "hammer", "area": 3},
                {"title": "c"},
            ]},
            domain,
        )

        assert [s.icon for s in doc.steps] == [Icon.SCISSORS, Icon.PIN, Icon.PIN]
        assert [s.area for s in doc.steps] == [Area.WAIST, Area.FULL, Area.FULL]

    def test_troubles_defaulted(self, domain):
        doc = validate_document(
            {"steps": [
                {"title": "a", "troubles": [{"q": "为什么起皱？"}, "bad", {"a": 1}]},
                {"title": "b", "troubles": "none"},
            ]},
            domain,
        )

        first = doc.steps[0].troubles
        assert [(t.q, t.a) for t in first] == [("为什么起皱？", ""), ("", "1")]
        assert doc.steps[1].troubles == ()

    def test_text_fields_defaulted(self, domain):
        step = validate_document({"steps": [{"title": "a", "desc": None, "tips": 5}]}, domain).steps[0]

        assert step.desc == ""
        assert step.technique == ""
        assert step.tips == "5"


class TestDesignName:

    def test_missing_uses_placeholder(self, domain):
        assert validate_document(doc_with(), domain).design_name == "立裁设计"
        assert validate_document(doc_with(designName="   "), domain).design_name == "立裁设计"

    def test_short_name_kept(self, domain):
        assert validate_document(doc_with(designName="  公主线连衣裙 "), domain).design_name == "公主线连衣裙"

    def test_long_name_cut_at_terminal(self, domain):
        name = "这是一款非常优雅的V领垂坠感连衣裙，采用斜裁工艺，适合各种场合穿着"
        assert len(name) > 30

        completion = DocumentCompleter(domain).complete(doc_with(designName=name))

        assert completion.document.design_name == "这是一款非常优雅的V领垂坠感连衣裙"
        assert "DESIGN_NAME_TRUNCATED" in [n.code for n in completion.notes]

    def test_long_name_without_terminal_capped(self, domain):
        doc = validate_document(doc_with(designName="褶" * 40), domain)
        assert doc.design_name == "褶" * 20

    def test_long_name_with_leading_terminal_falls_back(self, domain):
        doc = validate_document(doc_with(designName="。" + "褶" * 40), domain)
        assert doc.design_name == "立裁设计"

    @pytest.mark.parametrize("name", [
        "图片中展示的是一件连衣裙",
        "根据您上传的照片",
        "I can see a wrap dress",
        "Here is the tutorial",
    ])
    def test_conversational_name_replaced(self, domain, name):
        completion = DocumentCompleter(domain).complete(doc_with(designName=name))

        assert completion.document.design_name == "立裁设计作品"
        assert "DESIGN_NAME_CONVERSATIONAL" in [n.code for n in completion.notes]

    def test_ascii_word_boundary_not_conversational(self, domain):
        doc = validate_document(doc_with(designName="Imagery Wrap Top"), domain)
        assert doc.design_name == "Imagery Wrap Top"


class TestDifficulty:

    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        (5, 5),
        (2.5, 3),
        (3.5, 4),
        (4.49, 4),
        ("4", 4),
        (" 2.5 ", 3),
    ])
    def test_valid(self, value, expected):
        assert coerce_difficulty(value) == expected

    @pytest.mark.parametrize("value", [0, 6, 0.4, -1, True, False, None, "hard", "", math.nan, math.inf, [3], 10 ** 400])
    def test_invalid(self, value):
        assert coerce_difficulty(value) is None

    def test_invalid_defaults_to_three(self, domain):
        completion = DocumentCompleter(domain).complete(doc_with(difficulty="very hard"))

        assert completion.document.difficulty == 3
        assert "DIFFICULTY_DEFAULTED" in [n.code for n in completion.notes]

    def test_integer_beyond_float_range_defaults_to_three(self, domain):
        doc = validate_document(doc_with(difficulty=10 ** 400), domain)

        assert doc.difficulty == 3


class TestCollections:

    def test_missing_materials_and_tools_use_defaults(self, domain):
        doc = validate_document(doc_with(), domain)

        assert [m.item for m in doc.materials] == [m.item for m in domain.default_materials]
        assert [t.name for t in doc.tools] == [t.name for t in domain.default_tools]

    def test_unusable_materials_use_defaults(self, domain):
        doc = validate_document(doc_with(materials=[None, 3, "  "], tools="剪刀"), domain)

        assert doc.materials[0].item == "白坯布"
        assert doc.tools[0].name == "人台"

    def test_entries_completed_with_placeholders(self, domain):
        doc = validate_document(
            doc_with(
                materials=[{"spec": "薄纱"}, "珠针"],
                tools=[{"purpose": "裁布"}, "划粉"],
            ),
            domain,
        )

        assert [(m.item, m.spec, m.qty) for m in doc.materials] == [("材料", "薄纱", "适量"), ("珠针", "", "适量")]
        assert [(t.name, t.purpose) for t in doc.tools] == [("工具", "裁布"), ("划粉", "")]


class TestIdempotence:

    def test_validating_canonical_output_is_identity(self, domain, well_formed_doc):
        first = validate_document(well_formed_doc, domain)
        second = validate_document(first.to_wire(), domain)

        assert second == first

    def test_idempotent_after_repairs(self, domain):
        loose = {
            "designName": "这是一款非常优雅的V领垂坠感连衣裙，采用斜裁工艺，适合各种场合穿着",
            "difficulty": 4.5,
            "steps": ["铺布", {"icon": "FOLD", "troubles": [{"q": "x"}]}],
        }

        first = validate_document(loose, domain)
        second = validate_document(first.to_wire(), domain)

        assert second == first

    def test_canonical_output_has_no_notes(self, domain, well_formed_doc):
        first = validate_document(well_formed_doc, domain)
        completion = DocumentCompleter(domain).complete(first.to_wire())
        assert completion.notes == []


class TestHelpers:

    def test_truncate_name(self):
        assert truncate_name("短名！后面", "。，！？.,!?", 20) == "短名"
        assert truncate_name("abcdef", ".", 3) == "abc"

    def test_coerce_enum_accepts_members(self):
        assert coerce_enum(Icon.FOLD, Icon, Icon.PIN) == (Icon.FOLD, False)
        assert coerce_enum("nope", Icon, Icon.PIN) == (Icon.PIN, True)
