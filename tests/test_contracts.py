"""Registry, validator, dispatcher and envelope behaviour."""

import json

import pytest

from core.config import Settings
from core.contracts import ResponseEnvelope, ToolRegistry, ToolSpec
from core.errors import SchemaViolation, UnknownToolError
from core.models import ContractModel
from tools.adapters import ADAPTERS


class EchoArgs(ContractModel):
    message: str


async def _explode(args, ctx):
    raise RuntimeError("handler blew up")


class TestDiscovery:
    @pytest.mark.parametrize("adapter", sorted(ADAPTERS))
    def test_descriptor_lists_are_byte_identical_across_calls(self, make_registry, adapter):
        registry = make_registry(adapter)
        first = json.dumps([d.to_dict() for d in registry.list_tools()])
        second = json.dumps([d.to_dict() for d in registry.list_tools()])
        assert first == second

    def test_tools_are_listed_in_table_order(self, make_registry):
        registry = make_registry("growth-optimizer")
        assert [d.name for d in registry.list_tools()] == [
            "optimize_seo",
            "generate_thumbnail_concepts",
            "optimize_posting_schedule",
            "repurpose_content",
            "run_ab_test",
        ]

    def test_input_schema_uses_wire_names_and_declares_constraints(self, make_registry):
        registry = make_registry("idea-generator")
        schema = registry.get("generate_viral_ideas").descriptor.input_schema

        assert set(schema["required"]) == {"niche", "platform", "count"}
        assert schema["properties"]["count"]["minimum"] == 10
        assert schema["properties"]["count"]["maximum"] == 50
        assert schema["properties"]["trendWindow"]["default"] == "7d"
        assert schema["properties"]["platform"]["enum"] == [
            "youtube", "tiktok", "instagram-reels", "youtube-shorts", "all",
        ]

    def test_mutating_an_exported_descriptor_does_not_leak_back(self, make_registry):
        registry = make_registry("idea-generator")
        exported = registry.list_tools()[0].to_dict()
        exported["inputSchema"]["properties"].clear()
        assert registry.list_tools()[0].to_dict()["inputSchema"]["properties"]

    def test_duplicate_tool_names_are_rejected(self, settings, providers, test_logger):
        spec = ToolSpec("echo", "Echo", EchoArgs, _explode)
        with pytest.raises(ValueError, match="duplicate"):
            ToolRegistry("test", [spec, spec], settings, providers, test_logger)


class TestValidation:
    def test_missing_field_and_enum_violation_are_both_schema_violations(self, make_registry):
        registry = make_registry("idea-generator")
        with pytest.raises(SchemaViolation) as excinfo:
            registry.validate("generate_viral_ideas", {"platform": "myspace", "count": 20})

        paths = {v["path"]: v["kind"] for v in excinfo.value.violations}
        assert paths["niche"] == "missing"
        assert paths["platform"] == "literal_error"

    def test_nested_paths_use_wire_names(self, make_registry):
        registry = make_registry("script-to-video")
        with pytest.raises(SchemaViolation) as excinfo:
            registry.validate("generate_video_script", {"idea": {"title": "t", "hook": "h", "duration": 60}})
        assert [v["path"] for v in excinfo.value.violations] == ["idea.platform"]

    @pytest.mark.parametrize("count", [10, 50])
    def test_numeric_bounds_are_inclusive(self, make_registry, count):
        registry = make_registry("idea-generator")
        args = registry.validate("generate_viral_ideas", {"niche": "tech", "platform": "tiktok", "count": count})
        assert args.count == count

    @pytest.mark.parametrize("count", [9, 51])
    def test_numeric_bounds_reject_outside_values(self, make_registry, count):
        registry = make_registry("idea-generator")
        with pytest.raises(SchemaViolation) as excinfo:
            registry.validate("generate_viral_ideas", {"niche": "tech", "platform": "tiktok", "count": count})
        assert excinfo.value.violations[0]["path"] == "count"

    def test_defaults_are_filled(self, make_registry):
        registry = make_registry("script-to-video")
        args = registry.validate(
            "generate_video_script",
            {"idea": {"title": "t", "hook": "h", "platform": "youtube", "duration": 60}},
        )
        assert args.tone == "casual"
        assert args.include_voiceover is True
        assert args.include_b_roll is True

    def test_permissive_storyboard_keeps_unknown_fields(self, make_registry):
        registry = make_registry("script-to-video")
        args = registry.validate(
            "export_editing_project",
            {"storyboard": {"title": "Demo", "props": ["mug"], "locations": ["studio"]}, "format": "fcpxml"},
        )
        dumped = args.storyboard.model_dump(by_alias=True)
        assert dumped["props"] == ["mug"]
        assert dumped["locations"] == ["studio"]

    def test_strict_schemas_drop_unknown_fields(self, make_registry):
        registry = make_registry("growth-optimizer")
        args = registry.validate(
            "run_ab_test",
            {"element": "title", "original": "x", "platform": "youtube", "surprise": True},
        )
        assert "surprise" not in args.model_dump()


class TestCallEnvelope:
    @pytest.mark.asyncio
    async def test_unknown_tool_is_not_a_schema_violation(self, make_registry, text_generator):
        registry = make_registry("idea-generator")
        envelope = await registry.call("make_me_famous", {"niche": 42}, trace_id="trace-1")

        assert envelope.is_error
        payload = envelope.payload()
        assert payload == {"error": "Unknown tool: make_me_famous", "traceId": "trace-1"}
        assert "Invalid arguments" not in payload["error"]
        assert text_generator.calls == []

    def test_get_raises_unknown_tool(self, make_registry):
        with pytest.raises(UnknownToolError):
            make_registry("idea-generator").get("nope")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name, arguments",
        [
            ("generate_viral_ideas", {"niche": "tech", "platform": "youtube", "count": 5}),
            ("generate_viral_ideas", {"niche": "tech", "platform": "vine", "count": 20}),
            ("predict_virality", {"title": "x", "platform": "youtube", "niche": "tech"}),
        ],
    )
    async def test_invalid_arguments_never_reach_the_provider(
        self, make_registry, text_generator, trend_sources, name, arguments
    ):
        registry = make_registry("idea-generator")
        envelope = await registry.call(name, arguments)

        assert envelope.is_error
        assert envelope.payload()["error"].startswith(f"Invalid arguments for {name}")
        assert text_generator.calls == []
        assert all(source.calls == 0 for source in trend_sources.values())

    @pytest.mark.asyncio
    async def test_missing_credential_fails_before_any_provider_call(
        self, make_registry, settings, text_generator, trend_sources
    ):
        settings.environ = {}
        registry = make_registry("idea-generator")
        envelope = await registry.call(
            "generate_viral_ideas", {"niche": "tech", "platform": "youtube", "count": 10}
        )

        assert envelope.is_error
        assert envelope.payload()["error"] == "GEMINI_API_KEY not found"
        assert text_generator.calls == []
        assert all(source.calls == 0 for source in trend_sources.values())

    @pytest.mark.asyncio
    async def test_unexpected_handler_errors_become_error_envelopes(self, settings, providers, test_logger):
        registry = ToolRegistry("test", [ToolSpec("echo", "Echo", EchoArgs, _explode)], settings, providers, test_logger)
        envelope = await registry.call("echo", {"message": "hi"}, trace_id="abc")
        assert envelope.is_error
        assert envelope.payload() == {"error": "handler blew up", "traceId": "abc"}

    @pytest.mark.asyncio
    async def test_every_call_gets_a_fresh_trace_id(self, make_registry):
        registry = make_registry("idea-generator")
        first = await registry.call("nope", {})
        second = await registry.call("nope", {})
        assert first.payload()["traceId"] != second.payload()["traceId"]


class TestResponseEnvelope:
    def test_success_is_pretty_printed_and_has_no_error_flag(self):
        envelope = ResponseEnvelope.success({"count": 1})
        assert envelope.to_dict() == {"content": [{"type": "text", "text": '{\n  "count": 1\n}'}]}

    def test_failure_carries_message_and_trace_id(self):
        envelope = ResponseEnvelope.failure("boom", "t-1")
        wire = envelope.to_dict()
        assert wire["isError"] is True
        assert json.loads(wire["content"][0]["text"]) == {"error": "boom", "traceId": "t-1"}


class TestSettings:
    def test_require_reads_the_environment_at_call_time(self):
        environ = {}
        settings = Settings(environ=environ)
        environ["GEMINI_API_KEY"] = "late"
        assert settings.require("GEMINI_API_KEY") == "late"

    def test_artifact_path_is_named_from_trace_id(self, tmp_path):
        settings = Settings(environ={}, output_dir=tmp_path)
        assert settings.artifact_path("voiceover", "123-abc", "wav") == tmp_path / "voiceover-123-abc.wav"
