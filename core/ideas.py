# =============================================================================
# core/ideas.py  -  Idea generation: viral ideas, trend analysis, virality
# =============================================================================
#
# Three handlers, each  (arguments, ToolContext) -> JSON-ready value:
#
#   generate_viral_ideas     trends + Gemini -> list of ViralIdea records
#   analyze_trending_topics  trends only, no model call
#   predict_virality         Gemini score breakdown for one idea
#
# generate_viral_ideas re-validates every idea the model returns.  A bad
# idea is logged and dropped; the call still succeeds with the survivors.
# =============================================================================

import random
from datetime import datetime, timezone

from pydantic import ValidationError

from core.config import GEMINI_API_KEY
from core.contracts import ToolContext, violations_from
from core.models import AnalyzeTrendsArgs, GenerateIdeasArgs, PredictViralityArgs, ViralIdea

# Platforms consulted when generating ideas (the caller does not choose).
IDEA_TREND_PLATFORMS = ("youtube", "reddit", "google-trends")

VIRALITY_FALLBACK = {"overallScore": 50}


def build_ideas_prompt(args: GenerateIdeasArgs, trends: list[str], now: datetime) -> str:
    trend_lines = "\n".join(trends)
    return f"""Generate {args.count} viral {args.platform} video ideas for the {args.niche} niche.

Use these trending topics for inspiration:
{trend_lines}

Each idea must have:
{{
  "id": "unique-id",
  "title": "Attention-grabbing title",
  "hook": "First 5 seconds that stop scrolling",
  "platform": "{args.platform}",
  "category": "education/entertainment/etc",
  "viralScore": 85,
  "trendingTopics": ["topic1", "topic2"],
  "targetAudience": "Description of ideal viewer",
  "thumbnailConcept": "Visual description for thumbnail",
  "scriptOutline": [
    {{"section": "Hook", "duration": 5, "keyPoints": ["point1"]}},
    {{"section": "Main Content", "duration": 180, "keyPoints": ["point1", "point2"]}}
  ],
  "estimatedViews": {{"min": 10000, "max": 100000, "confidence": 0.75}},
  "seo": {{
    "tags": ["tag1", "tag2"],
    "description": "SEO-optimized description",
    "keywords": ["keyword1", "keyword2"]
  }},
  "generatedAt": "{now.isoformat()}"
}}

Platform-specific requirements:
- TikTok: Hook in first 1-3 seconds, max 60 seconds
- YouTube: Strong title SEO, 8-12 minute sweet spot
- Instagram Reels: Visual hooks, trending audio
- YouTube Shorts: 15-60 seconds, vertical format

Generate ideas with viral score 70+.

You are a viral content strategist. Generate {args.count} viral video ideas for {args.platform}.

Niche: {args.niche}
Current Trends: {", ".join(trends[:10])}

Return JSON array of viral ideas."""


def keep_valid_ideas(candidates: list, log) -> list[ViralIdea]:
    """Validate each generated idea on its own; drop the ones that fail."""
    ideas = []
    for index, candidate in enumerate(candidates):
        try:
            ideas.append(ViralIdea.model_validate(candidate))
        except ValidationError as exc:
            log.warning("Invalid idea skipped", meta={"index": index, "violations": violations_from(exc)})
    return ideas


async def generate_viral_ideas(args: GenerateIdeasArgs, ctx: ToolContext) -> dict:
    api_key = ctx.settings.require(GEMINI_API_KEY)

    trends = await ctx.providers.trends.fetch(args.niche, IDEA_TREND_PLATFORMS, ctx.log)
    prompt = build_ideas_prompt(args, trends, datetime.now(timezone.utc))

    ctx.log.info("Generating viral ideas", meta={"niche": args.niche, "count": args.count})
    text = await ctx.providers.text.generate(prompt, api_key)

    candidates = ctx.extract(text, "array", default=[])
    if not isinstance(candidates, list):
        candidates = []
    ideas = keep_valid_ideas(candidates, ctx.log)

    ctx.log.info("Ideas generated", meta={"count": len(ideas), "dropped": len(candidates) - len(ideas)})
    return {"ideas": ideas, "count": len(ideas)}


def estimate_trend(topic: str) -> dict:
    """Placeholder volume/growth figures, stable for a given topic."""
    rng = random.Random(topic)
    return {
        "topic": topic,
        "volume": rng.randint(10000, 109999),
        "growth": rng.randint(-50, 49),
    }


async def analyze_trending_topics(args: AnalyzeTrendsArgs, ctx: ToolContext) -> dict:
    trends = await ctx.providers.trends.fetch(args.niche, args.platforms, ctx.log)
    return {
        "niche": args.niche,
        "platforms": args.platforms,
        "trends": [estimate_trend(topic) for topic in trends],
        "topTrends": trends[:10],
        "analyzedAt": datetime.now(timezone.utc).isoformat(),
    }


def build_virality_prompt(args: PredictViralityArgs) -> str:
    return f"""Analyze the viral potential of this {args.platform} video idea:

Title: {args.title}
Description: {args.description}
Niche: {args.niche}

Rate on these factors (0-100):
1. Title clickability
2. Hook strength
3. Trending topic alignment
4. Audience appeal
5. Uniqueness

Return JSON:
{{
  "overallScore": 85,
  "breakdown": {{
    "titleClickability": 90,
    "hookStrength": 85,
    "trendAlignment": 80,
    "audienceAppeal": 85,
    "uniqueness": 75
  }},
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1"],
  "improvements": ["suggestion1", "suggestion2"],
  "estimatedViews": {{"min": 50000, "max": 500000}}
}}"""


async def predict_virality(args: PredictViralityArgs, ctx: ToolContext) -> dict:
    api_key = ctx.settings.require(GEMINI_API_KEY)

    ctx.log.info("Predicting virality", meta={"title": args.title})
    text = await ctx.providers.text.generate(build_virality_prompt(args), api_key)

    return ctx.extract(text, "object", default=VIRALITY_FALLBACK)
