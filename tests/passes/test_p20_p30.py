"""
Unit tests for the late pipeline passes (p20 validate, p30 diversify).
"""

import pytest

from drapekit.core.context import TransformContext, TransformRequest
from drapekit.core.errors import MissingSteps
from drapekit.ir.enums import Icon
from drapekit.passes.p20_validate import validate_schema
from drapekit.passes.p30_diversify import diversify_steps


def make_ctx(loose, domain):
    ctx = TransformContext.from_request(TransformRequest(text=""), domain)
    ctx.loose_document = loose
    return ctx


class TestP20Validate:
    """Tests for p20_validate pass."""

    def test_builds_document(self, domain, well_formed_doc):
        ctx = make_ctx(well_formed_doc, domain)

        validate_schema(ctx)

        assert ctx.document is not None
        assert ctx.document.design_name == "V领垂坠连衣裙"
        assert len(ctx.document.steps) == 2
        assert ctx.loose_document is None

    def test_defaults_become_diagnostics(self, domain):
        ctx = make_ctx({"steps": [{"title": "a"}]}, domain)

        validate_schema(ctx)

        codes = {d.code for d in ctx.diagnostics}
        assert {"DESIGN_NAME_DEFAULTED", "MATERIALS_DEFAULTED", "TOOLS_DEFAULTED"} <= codes
        assert all(d.source == "p20_validate" for d in ctx.diagnostics)

    def test_missing_steps_raises(self, domain):
        ctx = make_ctx({"designName": "裙", "steps": []}, domain)

        with pytest.raises(MissingSteps):
            validate_schema(ctx)

    def test_no_loose_document_raises(self, domain):
        ctx = make_ctx(None, domain)

        with pytest.raises(MissingSteps):
            validate_schema(ctx)


class TestP30Diversify:
    """Tests for p30_diversify pass."""

    def test_repairs_collapsed_icons(self, domain):
        steps = [{"title": t, "icon": "pin", "area": "full"} for t in ("裁剪前片", "熨烫下摆", "标记腰线", "整理造型")]
        ctx = make_ctx({"steps": steps}, domain)

        validate_schema(ctx)
        diversify_steps(ctx)

        icons = [s.icon for s in ctx.document.steps]
        assert len(set(icons)) > 1
        assert icons[0] is Icon.SCISSORS
        codes = {d.code for d in ctx.diagnostics}
        assert "ICON_DIVERSIFIED" in codes
        assert "AREA_DIVERSIFIED" in codes

    def test_no_document_is_noop(self, domain):
        ctx = make_ctx(None, domain)

        diversify_steps(ctx)

        assert ctx.document is None
        assert ctx.diagnostics == []
