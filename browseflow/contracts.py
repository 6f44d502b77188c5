"""Core step and result contracts for browseflow workflows."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_CAPTURE_SECONDS,
    DEFAULT_SPEECH_MODEL,
    DEFAULT_SPEECH_VOICE,
    DEFAULT_TRANSCRIPTION_MODEL,
)

StepStatus = Literal["pending", "running", "completed", "error"]

STEP_KINDS = (
    "read-page",
    "system-prompt",
    "generation-agent",
    "pass-through-store",
    "text-input",
    "text-output",
    "audio-input",
    "transcription",
    "speech-synthesis",
    "string-op",
    "conditional",
    "webhook",
    "open-page",
    "output-format",
    "iterator",
)

# Kinds whose materialized value seeds the data bag when they lead the run.
INPUT_KINDS = frozenset({"text-input", "audio-input"})


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StepConfig(_CamelModel):
    """Settings shared by every step kind.

    ``identifier`` and ``output_type`` name extra data bag keys the step's
    output is published under. Keys not declared by a kind are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    identifier: Optional[str] = None
    output_type: Optional[str] = None

    def publish_keys(self) -> List[str]:
        return [key for key in (self.identifier, self.output_type) if key]


class ReadPageConfig(StepConfig):
    filter_path: str = "*"


class SystemPromptConfig(StepConfig):
    value: str = ""


class GenerationAgentConfig(StepConfig):
    """Model call settings; unset values fall back to the generation config."""

    model: Optional[str] = None
    prompt: Optional[str] = None
    system_prompt: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    json_schema: Any = None


class PassThroughStoreConfig(StepConfig):
    store_type: str = "local"
    action: str = "read"


class TextInputConfig(StepConfig):
    pass


class TextOutputConfig(StepConfig):
    pass


class AudioInputConfig(StepConfig):
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    capture_seconds: float = DEFAULT_CAPTURE_SECONDS


class TranscriptionConfig(StepConfig):
    model: str = DEFAULT_TRANSCRIPTION_MODEL


class SpeechSynthesisConfig(StepConfig):
    model: str = DEFAULT_SPEECH_MODEL
    voice: str = DEFAULT_SPEECH_VOICE


class StringOpConfig(StepConfig):
    operation: str = "trim"
    parameter: str = ""


ConditionalOperator = Literal[
    "equals", "notEquals", "greaterThan", "lessThan", "contains", "notContains"
]


class ConditionalConfig(StepConfig):
    operator: ConditionalOperator = "equals"
    comparison_value: str = ""


class WebhookConfig(StepConfig):
    endpoint: Optional[str] = None
    method: Optional[str] = None
    auth_key: Optional[str] = None


class OpenPageConfig(StepConfig):
    url: Optional[str] = None


class OutputFormatConfig(StepConfig):
    value: Any = None


class IteratorConfig(StepConfig):
    items: List[Any] = Field(default_factory=list)


class BaseStep(_CamelModel):
    """One unit of a workflow.

    ``status``, ``logs``, ``live_value``, ``branch`` and ``flagged`` are owned
    by the runner; executors never write them.
    """

    id: str
    kind: str
    name: Optional[str] = None
    status: StepStatus = "pending"
    logs: List[str] = Field(default_factory=list)
    config: StepConfig = Field(default_factory=StepConfig)
    materialized_value: Any = None
    live_value: Any = None
    branch: Optional[str] = None
    flagged: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def is_input(self) -> bool:
        return self.kind in INPUT_KINDS


class ReadPageStep(BaseStep):
    kind: Literal["read-page"] = "read-page"
    config: ReadPageConfig = Field(default_factory=ReadPageConfig)


class SystemPromptStep(BaseStep):
    kind: Literal["system-prompt"] = "system-prompt"
    config: SystemPromptConfig = Field(default_factory=SystemPromptConfig)


class GenerationAgentStep(BaseStep):
    kind: Literal["generation-agent"] = "generation-agent"
    config: GenerationAgentConfig = Field(default_factory=GenerationAgentConfig)


class PassThroughStoreStep(BaseStep):
    kind: Literal["pass-through-store"] = "pass-through-store"
    config: PassThroughStoreConfig = Field(default_factory=PassThroughStoreConfig)


class TextInputStep(BaseStep):
    kind: Literal["text-input"] = "text-input"
    config: TextInputConfig = Field(default_factory=TextInputConfig)


class TextOutputStep(BaseStep):
    kind: Literal["text-output"] = "text-output"
    config: TextOutputConfig = Field(default_factory=TextOutputConfig)


class AudioInputStep(BaseStep):
    kind: Literal["audio-input"] = "audio-input"
    config: AudioInputConfig = Field(default_factory=AudioInputConfig)


class TranscriptionStep(BaseStep):
    kind: Literal["transcription"] = "transcription"
    config: TranscriptionConfig = Field(default_factory=TranscriptionConfig)


class SpeechSynthesisStep(BaseStep):
    kind: Literal["speech-synthesis"] = "speech-synthesis"
    config: SpeechSynthesisConfig = Field(default_factory=SpeechSynthesisConfig)


class StringOpStep(BaseStep):
    kind: Literal["string-op"] = "string-op"
    config: StringOpConfig = Field(default_factory=StringOpConfig)


class ConditionalStep(BaseStep):
    kind: Literal["conditional"] = "conditional"
    config: ConditionalConfig = Field(default_factory=ConditionalConfig)


class WebhookStep(BaseStep):
    kind: Literal["webhook"] = "webhook"
    config: WebhookConfig = Field(default_factory=WebhookConfig)


class OpenPageStep(BaseStep):
    kind: Literal["open-page"] = "open-page"
    config: OpenPageConfig = Field(default_factory=OpenPageConfig)


class OutputFormatStep(BaseStep):
    kind: Literal["output-format"] = "output-format"
    config: OutputFormatConfig = Field(default_factory=OutputFormatConfig)


class IteratorStep(BaseStep):
    kind: Literal["iterator"] = "iterator"
    config: IteratorConfig = Field(default_factory=IteratorConfig)


Step = Annotated[
    Union[
        ReadPageStep,
        SystemPromptStep,
        GenerationAgentStep,
        PassThroughStoreStep,
        TextInputStep,
        TextOutputStep,
        AudioInputStep,
        TranscriptionStep,
        SpeechSynthesisStep,
        StringOpStep,
        ConditionalStep,
        WebhookStep,
        OpenPageStep,
        OutputFormatStep,
        IteratorStep,
    ],
    Field(discriminator="kind"),
]

_STEP_LIST_ADAPTER: TypeAdapter[List[Step]] = TypeAdapter(List[Step])

_DESCRIPTOR_FIELDS = {"id", "kind", "name", "config", "materialized_value"}


def parse_steps(data: Iterable[Dict[str, Any]]) -> List[BaseStep]:
    """Build typed steps from descriptor mappings."""
    return _STEP_LIST_ADAPTER.validate_python(list(data))


def dump_steps(steps: Iterable[BaseStep]) -> List[Dict[str, Any]]:
    """Return the exportable descriptor form of ``steps``."""
    return [
        step.model_dump(
            mode="json", by_alias=True, include=_DESCRIPTOR_FIELDS, exclude_none=True
        )
        for step in steps
    ]


class StepResult(BaseModel):
    """Envelope returned by every executor."""

    output: Any = None
    log: str = ""
    success: bool = True
    branch: Optional[str] = None
    parsed_schema: Any = None


class WorkflowResult(BaseModel):
    """Outcome of a complete workflow run."""

    success: bool
    data: Dict[str, Any] = Field(default_factory=dict)
    final_output: Any = None
    error: Optional[str] = None
    failed_step_id: Optional[str] = None


class PageInfo(BaseModel):
    """The page a host currently shows to the user."""

    url: str
    title: Optional[str] = None
    tab_id: Optional[int] = None


class AudioClip(BaseModel):
    """Audio payload passed between audio steps."""

    data: Any = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None


class GenerationRequest(BaseModel):
    """Arguments for one call to a host's text generation capability."""

    prompt: str
    system_prompt: str = ""
    json_schema: Optional[str] = None
    model: str
    temperature: float
    max_tokens: int
    stream: bool = True
