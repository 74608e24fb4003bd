"""URL parameter codec - parsing defaults, canonical encoding, round-trip."""

from __future__ import annotations

import pytest

from pipeline_canvas.pipeline.state import URLPipelineParams
from pipeline_canvas.pipeline.url_codec import (
    CANONICAL_KEYS,
    build_canvas_url,
    encode_query,
    parse_query,
)


class TestParseQuery:
    def test_defaults_for_empty_query(self):
        assert parse_query("") == URLPipelineParams(
            mode="edit",
            template_name="",
            enterprise="",
            entity="",
            deployment_type="Integration",
            template_id="",
        )

    def test_empty_values_use_defaults(self):
        params = parse_query("mode=&deploymentType=&name=")
        assert params.mode == "edit"
        assert params.deployment_type == "Integration"
        assert params.template_name == ""

    def test_all_fields(self):
        params = parse_query(
            "mode=create&templateId=fiori-app&name=My+App&enterprise=Acme"
            "&entity=Billing&deploymentType=Extension"
        )
        assert params == URLPipelineParams(
            mode="create",
            template_name="My App",
            enterprise="Acme",
            entity="Billing",
            deployment_type="Extension",
            template_id="fiori-app",
        )

    def test_leading_question_mark(self):
        assert parse_query("?enterprise=Acme").enterprise == "Acme"

    def test_full_path(self):
        params = parse_query("/pipelines/canvas?templateId=abap-cloud&entity=HR#top")
        assert params.template_id == "abap-cloud"
        assert params.entity == "HR"

    def test_absolute_url(self):
        params = parse_query("https://example.com/pipelines/canvas?entity=HR#top")
        assert params.entity == "HR"

    def test_question_mark_inside_value(self):
        params = parse_query("name=What?&enterprise=Acme&entity=Billing")
        assert params.template_name == "What?"
        assert params.enterprise == "Acme"
        assert params.entity == "Billing"

    def test_hash_inside_value(self):
        params = parse_query("name=Release#2&enterprise=Acme")
        assert params.template_name == "Release#2"
        assert params.enterprise == "Acme"

    def test_only_one_leading_question_mark_stripped(self):
        assert parse_query("??entity=HR").entity == ""

    def test_key_order_irrelevant(self):
        a = parse_query("entity=HR&enterprise=SAP")
        b = parse_query("enterprise=SAP&entity=HR")
        assert a == b

    def test_first_repeated_value_wins(self):
        assert parse_query("entity=A&entity=B").entity == "A"

    def test_unknown_keys_ignored(self):
        assert parse_query("foo=bar") == parse_query("")

    def test_invalid_deployment_type_not_rejected_here(self):
        assert parse_query("deploymentType=hybrid").deployment_type == "hybrid"


class TestEncodeQuery:
    def test_canonical_key_order(self):
        query = encode_query(URLPipelineParams(
            mode="edit",
            template_name="n",
            enterprise="e",
            entity="x",
            deployment_type="Extension",
            template_id="t",
        ))
        keys = [pair.split("=", 1)[0] for pair in query.split("&")]
        assert keys == list(CANONICAL_KEYS)
        assert keys == ["mode", "templateId", "name", "enterprise", "entity", "deploymentType"]

    def test_space_encoded_as_plus(self):
        query = encode_query(URLPipelineParams(template_name="Acme Billing Pipeline"))
        assert "name=Acme+Billing+Pipeline" in query

    def test_reserved_characters_escaped(self):
        query = encode_query(URLPipelineParams(entity="R&D=1"))
        assert "entity=R%26D%3D1" in query


class TestRoundTrip:
    @pytest.mark.parametrize("params", [
        URLPipelineParams(
            mode="edit", template_name="Payroll", enterprise="Acme",
            entity="Billing", deployment_type="Integration", template_id="fiori-app",
        ),
        URLPipelineParams(
            mode="preview", template_name="S/4 HANA + CAP", enterprise="SAP SE",
            entity="R&D", deployment_type="Extension", template_id="sap-s4hana-extension",
        ),
        URLPipelineParams(
            mode="create", template_name="a?b#c", enterprise="100%",
            entity="x=y", deployment_type="Extension", template_id="abap-cloud",
        ),
    ])
    def test_parse_inverts_encode(self, params):
        assert parse_query(encode_query(params)) == params


class TestBuildCanvasURL:
    def test_default_path(self):
        url = build_canvas_url(URLPipelineParams(template_id="bas-devspace"))
        assert url.startswith("/pipelines/canvas?mode=edit&templateId=bas-devspace&")

    def test_custom_path(self):
        url = build_canvas_url(URLPipelineParams(), path="/editor")
        assert url.startswith("/editor?")

    def test_url_parses_back(self):
        params = URLPipelineParams(enterprise="Acme", entity="Billing", template_id="fiori-app")
        assert parse_query(build_canvas_url(params)) == params
