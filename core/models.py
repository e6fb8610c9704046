# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# Two kinds of models live here:
#
#   1. ARGUMENT CONTRACTS - one per tool.  Each model is both the inputSchema
#      published on discovery and the validator run on every call.  Field
#      names are snake_case in Python and camelCase on the wire
#      (include_b_roll <-> includeBRoll).
#
#   2. RESULT RECORDS - shapes we re-validate after a model generates them
#      (ViralIdea).  Records that do not fit are dropped, not repaired.
#
# Numeric bounds (ge / le) are inclusive.  Unknown fields are ignored except
# on PermissiveModel subclasses, which keep them.
# =============================================================================

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Base for argument and result models: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PermissiveModel(ContractModel):
    """Contract that accepts unknown fields and passes them through."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# --- Enumerations ------------------------------------------------------------
IdeaPlatform = Literal["youtube", "tiktok", "instagram-reels", "youtube-shorts", "all"]
VideoPlatform = Literal["youtube", "tiktok", "instagram-reels", "youtube-shorts"]
TrendPlatform = Literal["youtube", "tiktok", "twitter", "reddit", "google-trends"]
SocialPlatform = Literal["youtube", "tiktok", "instagram"]
SchedulePlatform = Literal["youtube", "tiktok", "instagram", "twitter"]
ClipPlatform = Literal["tiktok", "instagram-reels", "youtube-shorts", "twitter"]
ContentCategory = Literal[
    "education", "entertainment", "comedy", "tutorial", "review",
    "vlog", "gaming", "lifestyle", "tech", "fitness",
]


# =============================================================================
# Idea generator
# =============================================================================
class GenerateIdeasArgs(ContractModel):
    niche: str = Field(description="Content niche (tech, fitness, cooking, gaming, etc.)")
    platform: IdeaPlatform
    count: int = Field(ge=10, le=50, description="Number of ideas to generate")
    trend_window: Literal["24h", "7d", "30d"] = Field("7d", description="Trend analysis time window")


class AnalyzeTrendsArgs(ContractModel):
    niche: str
    platforms: list[TrendPlatform]


class PredictViralityArgs(ContractModel):
    title: str
    description: str
    platform: VideoPlatform
    niche: str


class ScriptSection(ContractModel):
    section: str
    duration: float
    key_points: list[str]


class ViewEstimate(ContractModel):
    min: float
    max: float
    confidence: float


class SeoMetadata(ContractModel):
    tags: list[str] = Field(max_length=30)
    description: str = Field(max_length=500)
    keywords: list[str]


class ViralIdea(ContractModel):
    """One generated idea.  Ideas that do not fit this shape are discarded."""

    id: str
    title: str = Field(min_length=10, max_length=100)
    hook: str = Field(min_length=10, max_length=200)
    platform: IdeaPlatform
    category: ContentCategory
    viral_score: float = Field(ge=0, le=100)
    trending_topics: list[str]
    target_audience: str
    thumbnail_concept: str
    script_outline: list[ScriptSection]
    estimated_views: ViewEstimate
    seo: SeoMetadata
    generated_at: datetime


# =============================================================================
# Script production
# =============================================================================
class VideoIdea(ContractModel):
    title: str
    hook: str
    platform: VideoPlatform
    duration: float = Field(description="Target duration in seconds")
    outline: Optional[list[ScriptSection]] = None


class GenerateScriptArgs(ContractModel):
    idea: VideoIdea
    tone: Literal["energetic", "educational", "casual", "professional", "humorous"] = "casual"
    include_voiceover: bool = Field(True, description="Generate voiceover script")
    include_b_roll: bool = Field(True, description="Generate b-roll suggestions")


class GenerateStoryboardArgs(ContractModel):
    script: str
    platform: VideoPlatform
    visual_style: Literal["talking-head", "b-roll-heavy", "screen-record", "animated", "hybrid"] = "hybrid"


class GenerateVoiceoverArgs(ContractModel):
    script: str
    voice: str = Field("neutral", description="Voice ID or type (male/female/energetic/calm)")
    provider: Literal["elevenlabs", "huggingface"] = "huggingface"
    format: Literal["mp3", "wav"] = "mp3"


class Storyboard(PermissiveModel):
    """Whatever generate_storyboard produced; only title and shots are read.

    Shots are not checked here: the renderers skip entries they cannot time.
    """

    title: Optional[str] = None
    shots: Optional[list[Any]] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ExportProjectArgs(ContractModel):
    storyboard: Storyboard
    voiceover_path: Optional[str] = None
    b_roll_suggestions: Optional[list[str]] = None
    format: Literal["fcpxml", "premiere-xml", "davinci-xml"]


# =============================================================================
# Growth optimizer
# =============================================================================
class OptimizeSeoArgs(ContractModel):
    title: str
    description: str
    platform: SocialPlatform
    niche: str
    target_audience: Optional[str] = None


class ThumbnailConceptArgs(ContractModel):
    title: str
    platform: SocialPlatform
    niche: Optional[str] = None
    style: Optional[Literal["minimalist", "bold-text", "reaction-face", "before-after", "mystery"]] = None


class AudienceDemographics(ContractModel):
    age_range: Optional[str] = None
    top_countries: Optional[list[str]] = None
    gender: Optional[dict[str, Any]] = None


class PerformanceSample(ContractModel):
    post_time: datetime = Field(description="When the post went live (ISO-8601)")
    views: float
    engagement: float


class PostingScheduleArgs(ContractModel):
    platform: SchedulePlatform
    timezone: str = Field(description="Audience timezone (e.g., America/New_York)")
    audience_demographics: Optional[AudienceDemographics] = None
    historical_performance: Optional[list[PerformanceSample]] = None


class RepurposeContentArgs(ContractModel):
    video_transcript: str
    video_duration: float = Field(description="Original video duration in seconds")
    target_platforms: list[ClipPlatform]
    clip_duration: float = Field(45, description="Target clip length in seconds (15-60 works best)")


class ABTestArgs(ContractModel):
    element: Literal["thumbnail", "title", "hook"]
    original: str = Field(description="Original version")
    variants: int = Field(3, ge=2, le=5, description="Number of variants to generate (2-5)")
    platform: SocialPlatform
