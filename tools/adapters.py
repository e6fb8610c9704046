# =============================================================================
# tools/adapters.py  -  The tool tables, one per adapter process
# =============================================================================
#
# Each adapter is just an ordered tuple of ToolSpecs.  A row says:
#
#     name         what the caller invokes
#     description  what the calling model reads to decide WHEN to call it
#     arguments    the pydantic contract (published AND enforced)
#     handler      the core/ function doing the work
#     extraction   STRICT / LENIENT handling of unusable model output
#
# Extraction policy: generate_video_script and generate_storyboard are
# STRICT.  Every other generative tool is LENIENT and logs a warning when it
# falls back to its empty default.  Tools with no model call declare none.
# =============================================================================

from core import export, growth, ideas, scripts
from core.contracts import ToolSpec
from core.extraction import ExtractionPolicy
from core.models import (
    ABTestArgs,
    AnalyzeTrendsArgs,
    ExportProjectArgs,
    GenerateIdeasArgs,
    GenerateScriptArgs,
    GenerateStoryboardArgs,
    GenerateVoiceoverArgs,
    OptimizeSeoArgs,
    PostingScheduleArgs,
    PredictViralityArgs,
    RepurposeContentArgs,
    ThumbnailConceptArgs,
)

STRICT = ExtractionPolicy.STRICT
LENIENT = ExtractionPolicy.LENIENT


IDEA_GENERATOR = (
    ToolSpec(
        name="generate_viral_ideas",
        description="Generate 10-50 viral content ideas based on trending topics and niche",
        arguments=GenerateIdeasArgs,
        handler=ideas.generate_viral_ideas,
        extraction=LENIENT,
    ),
    ToolSpec(
        name="analyze_trending_topics",
        description="Analyze current trending topics across platforms for a niche",
        arguments=AnalyzeTrendsArgs,
        handler=ideas.analyze_trending_topics,
    ),
    ToolSpec(
        name="predict_virality",
        description="Predict viral potential of a content idea (0-100 score)",
        arguments=PredictViralityArgs,
        handler=ideas.predict_virality,
        extraction=LENIENT,
    ),
)


SCRIPT_TO_VIDEO = (
    ToolSpec(
        name="generate_video_script",
        description="Generate full video script from idea/outline with timestamps, hooks, transitions",
        arguments=GenerateScriptArgs,
        handler=scripts.generate_video_script,
        extraction=STRICT,
    ),
    ToolSpec(
        name="generate_storyboard",
        description="Create visual storyboard from script with shot list, camera angles, visuals",
        arguments=GenerateStoryboardArgs,
        handler=scripts.generate_storyboard,
        extraction=STRICT,
    ),
    ToolSpec(
        name="generate_voiceover",
        description="Generate AI voiceover audio file from script (ElevenLabs or HuggingFace TTS)",
        arguments=GenerateVoiceoverArgs,
        handler=scripts.generate_voiceover,
    ),
    ToolSpec(
        name="export_editing_project",
        description="Export timeline to Final Cut Pro XML, Premiere Pro XML, or DaVinci Resolve",
        arguments=ExportProjectArgs,
        handler=export.export_editing_project,
    ),
)


GROWTH_OPTIMIZER = (
    ToolSpec(
        name="optimize_seo",
        description="Optimize video title, description, tags for maximum discoverability",
        arguments=OptimizeSeoArgs,
        handler=growth.optimize_seo,
        extraction=LENIENT,
    ),
    ToolSpec(
        name="generate_thumbnail_concepts",
        description="Generate 5 high-CTR thumbnail concepts with A/B test suggestions",
        arguments=ThumbnailConceptArgs,
        handler=growth.generate_thumbnail_concepts,
        extraction=LENIENT,
    ),
    ToolSpec(
        name="optimize_posting_schedule",
        description="Analyze audience analytics and suggest optimal posting times",
        arguments=PostingScheduleArgs,
        handler=growth.optimize_posting_schedule,
    ),
    ToolSpec(
        name="repurpose_content",
        description="Take 1 long-form video and generate 10+ short-form clips with hooks",
        arguments=RepurposeContentArgs,
        handler=growth.repurpose_content,
        extraction=LENIENT,
    ),
    ToolSpec(
        name="run_ab_test",
        description="Generate A/B test variants for thumbnails, titles, or hooks",
        arguments=ABTestArgs,
        handler=growth.run_ab_test,
        extraction=LENIENT,
    ),
)


# adapter name -> (MCP server name, tool table)
ADAPTERS = {
    "idea-generator": ("viral-idea-generator-mcp", IDEA_GENERATOR),
    "script-to-video": ("script-to-video-mcp", SCRIPT_TO_VIDEO),
    "growth-optimizer": ("growth-optimizer-mcp", GROWTH_OPTIMIZER),
}
