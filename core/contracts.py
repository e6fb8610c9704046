# =============================================================================
# core/contracts.py  -  The tool contract layer shared by every adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Implements the one skeleton every adapter process runs:
#
#     call(name, arguments)
#       1. mint a trace id, bind a TraceLogger to it
#       2. look up the ToolSpec          -> UnknownToolError
#       3. validate the arguments        -> SchemaViolation
#       4. run the handler               -> ConfigurationError / ProviderError
#       5. wrap the result (or failure) in a ResponseEnvelope
#
#   Adapters (tools/adapters.py) only supply a table of ToolSpecs.
#
# SINGLE SOURCE OF TRUTH FOR ARGUMENTS:
#   A ToolSpec holds ONE pydantic model.  The inputSchema shown to callers on
#   discovery is generated from that model, and the runtime validator IS that
#   model, so the documented and the enforced contract cannot drift apart.
#
# WHERE FAILURES ARE CAUGHT:
#   Only in ToolRegistry.call().  Handlers raise; they never build error
#   envelopes themselves.
# =============================================================================

import copy
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, Optional

from pydantic import BaseModel, ValidationError

from core.config import Settings
from core.errors import ContentCreatorError, SchemaViolation, UnknownToolError
from core.extraction import ExtractionPolicy, extract_json
from core.providers import Providers
from core.tracing import TraceLogger, new_trace_id


# -----------------------------------------------------------------------------
# Descriptors and envelopes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """What a caller sees on discovery."""

    name: str
    description: str
    input_schema: dict

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Pretty-printed JSON, the format of every envelope's text item."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)


@dataclass(frozen=True)
class ResponseEnvelope:
    """Uniform reply: one text item holding a JSON document, plus an error flag."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, result: Any) -> "ResponseEnvelope":
        return cls(text=to_json(result))

    @classmethod
    def failure(cls, message: str, trace_id: str) -> "ResponseEnvelope":
        return cls(text=to_json({"error": message, "traceId": trace_id}), is_error=True)

    @property
    def content(self) -> list[dict]:
        return [{"type": "text", "text": self.text}]

    def payload(self) -> Any:
        return json.loads(self.text)

    def to_dict(self) -> dict:
        envelope: dict[str, Any] = {"content": self.content}
        if self.is_error:
            envelope["isError"] = True
        return envelope


# -----------------------------------------------------------------------------
# Per-call context handed to every handler
# -----------------------------------------------------------------------------
@dataclass
class ToolContext:
    trace_id: str
    log: TraceLogger
    settings: Settings
    providers: Providers
    extraction: Optional[ExtractionPolicy] = None

    def extract(self, text: str, kind: str, default: Any = None) -> Any:
        """Extract JSON from provider text using this tool's declared policy."""
        if self.extraction is None:
            raise RuntimeError("tool declares no extraction policy")
        return extract_json(text, kind, self.extraction, default, log=self.log)


Handler = Callable[[Any, ToolContext], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    """One row of an adapter table: name, contract, handler, extraction policy."""

    name: str
    description: str
    arguments: type[BaseModel]
    handler: Handler
    extraction: Optional[ExtractionPolicy] = None
    descriptor: ToolDescriptor = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        schema = self.arguments.model_json_schema(by_alias=True)
        object.__setattr__(self, "descriptor", ToolDescriptor(self.name, self.description, schema))

    def validate(self, arguments: Any) -> BaseModel:
        try:
            return self.arguments.model_validate({} if arguments is None else arguments)
        except ValidationError as exc:
            raise SchemaViolation(self.name, violations_from(exc)) from None


def violations_from(exc: ValidationError) -> list[dict]:
    """Flatten a pydantic ValidationError into path/kind/message records."""
    return [
        {
            "path": ".".join(str(part) for part in error["loc"]),
            "kind": error["type"],
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


# -----------------------------------------------------------------------------
# Registry + dispatcher + envelope builder
# -----------------------------------------------------------------------------
class ToolRegistry:
    """The adapter skeleton, parameterized by a table of ToolSpecs."""

    def __init__(
        self,
        name: str,
        specs: Iterable[ToolSpec],
        settings: Settings,
        providers: Providers,
        logger,
    ):
        self.name = name
        self.settings = settings
        self.providers = providers
        self.logger = logger
        self._specs: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"duplicate tool name in {name}: {spec.name}")
            self._specs[spec.name] = spec

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    @property
    def specs(self) -> list[ToolSpec]:
        return list(self._specs.values())

    def list_tools(self) -> list[ToolDescriptor]:
        return [spec.descriptor for spec in self._specs.values()]

    def get(self, name: str) -> ToolSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def validate(self, name: str, arguments: Any) -> BaseModel:
        return self.get(name).validate(arguments)

    async def dispatch(self, name: str, arguments: Any, log: TraceLogger) -> Any:
        """Look up, validate and run exactly one handler; failures propagate."""
        spec = self.get(name)
        args = spec.validate(arguments)
        context = ToolContext(
            trace_id=log.trace_id,
            log=log,
            settings=self.settings,
            providers=self.providers,
            extraction=spec.extraction,
        )
        return await spec.handler(args, context)

    async def call(self, name: str, arguments: Any, trace_id: Optional[str] = None) -> ResponseEnvelope:
        log = TraceLogger(self.logger, trace_id or new_trace_id())
        log.request(name, arguments)

        try:
            result = await self.dispatch(name, arguments, log)
            envelope = ResponseEnvelope.success(result)
        except ContentCreatorError as exc:
            log.error("Tool execution failed", meta={"code": exc.code, "error": exc.message, "details": exc.details})
            envelope = ResponseEnvelope.failure(exc.message, log.trace_id)
        except Exception as exc:
            log.exception("Tool execution failed", meta={"code": "INTERNAL_ERROR"})
            envelope = ResponseEnvelope.failure(str(exc) or "Unknown error", log.trace_id)

        log.response(name, envelope.text, envelope.is_error)
        return envelope
