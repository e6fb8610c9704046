# =============================================================================
# core/scripts.py  -  Script production: script, storyboard, voiceover
# =============================================================================
#
# generate_video_script and generate_storyboard are STRICT: if Gemini's
# answer holds no parseable JSON object the call fails with an
# ExtractionError.  generate_voiceover talks to a TTS provider instead and
# writes the audio next to the other generated artifacts.
# =============================================================================

import math

from core.config import GEMINI_API_KEY
from core.contracts import ToolContext
from core.models import GenerateScriptArgs, GenerateStoryboardArgs, GenerateVoiceoverArgs

# Per-platform timing, in seconds.
PLATFORM_SPECS = {
    "youtube": {"max_duration": 720, "ideal_duration": 480, "hook_duration": 15},
    "tiktok": {"max_duration": 180, "ideal_duration": 60, "hook_duration": 3},
    "instagram-reels": {"max_duration": 90, "ideal_duration": 45, "hook_duration": 3},
    "youtube-shorts": {"max_duration": 60, "ideal_duration": 45, "hook_duration": 5},
}

VERTICAL_PLATFORMS = ("tiktok", "instagram-reels")

# Rough speaking rate used to estimate voiceover length.
CHARS_PER_SECOND = 15


def _format_seconds(value: float) -> str:
    return f"{value:g}"


def build_script_prompt(args: GenerateScriptArgs) -> str:
    idea = args.idea
    spec = PLATFORM_SPECS[idea.platform]
    duration = _format_seconds(idea.duration)

    if idea.platform == "youtube":
        pacing = "Pattern interrupt every 30-45s to maintain retention"
    else:
        pacing = "Fast-paced, high energy throughout"
    framing = "Vertical format (9:16)" if idea.platform in VERTICAL_PLATFORMS else "Horizontal format (16:9)"
    interrupt_every = "60" if args.tone == "educational" else "30"

    outline = ""
    if idea.outline:
        sections = "\n".join(
            f"- {s.section} ({_format_seconds(s.duration)}s): {', '.join(s.key_points)}" for s in idea.outline
        )
        outline = f"\n**Outline to follow:**\n{sections}\n"

    extras = []
    if args.include_b_roll:
        extras.append("- Suggest 8-12 b-roll clips with exact timestamps")
    if args.include_voiceover:
        extras.append("- Write the full voiceover for every scene, ready to record")

    return f"""Generate a COMPLETE video script for {idea.platform}.

**Video Details:**
- Title: {idea.title}
- Hook: {idea.hook}
- Target Duration: {duration}s (max: {spec["max_duration"]}s)
- Tone: {args.tone}
{outline}
**Platform Requirements:**
- Hook must grab attention in first {spec["hook_duration"]} seconds
- {pacing}
- {framing}

**Script Structure (return JSON):**
{{
  "title": "{idea.title}",
  "platform": "{idea.platform}",
  "totalDuration": {duration},
  "scenes": [
    {{
      "timestamp": "00:00",
      "duration": {spec["hook_duration"]},
      "sceneType": "hook",
      "voiceover": "Exact words to say (conversational, {args.tone} tone)",
      "onScreenText": "Text overlays (if any)",
      "visualCue": "What viewer sees (camera angle, b-roll, graphics)",
      "audioNotes": "Music/SFX suggestions",
      "transitionTo": "cut/fade/zoom"
    }}
  ],
  "bRollSuggestions": [
    {{
      "timestamp": "00:15",
      "description": "Stock footage of...",
      "keywords": ["search", "terms"],
      "duration": 3
    }}
  ],
  "musicSuggestions": {{
    "genre": "upbeat electronic",
    "mood": "energetic",
    "keywords": ["royalty-free", "non-copyrighted"]
  }},
  "callToAction": {{
    "timestamp": "{math.floor(idea.duration * 0.9)}s",
    "voiceover": "Subscribe for more...",
    "visualCue": "Subscribe button animation"
  }}
}}

**Critical:**
- Every {interrupt_every} seconds, add a pattern interrupt (question, visual change, reveal)
- Include timestamps for EVERY scene change
- Voiceover must be word-for-word, natural speech (contractions, filler words if casual)
- Visual cues must be specific ("Close-up of hands typing", not "Person working")
{chr(10).join(extras)}

Generate the COMPLETE script now."""


async def generate_video_script(args: GenerateScriptArgs, ctx: ToolContext) -> dict:
    api_key = ctx.settings.require(GEMINI_API_KEY)

    ctx.log.info("Generating video script", meta={"title": args.idea.title, "duration": args.idea.duration})
    text = await ctx.providers.text.generate(build_script_prompt(args), api_key)

    script = ctx.extract(text, "object")
    scenes = script.get("scenes") if isinstance(script, dict) else None
    ctx.log.info("Script generated", meta={"scenes": len(scenes) if isinstance(scenes, list) else 0})
    return script


def build_storyboard_prompt(args: GenerateStoryboardArgs) -> str:
    if args.platform in VERTICAL_PLATFORMS:
        framing = "Vertical framing, dynamic movement"
    else:
        framing = "Horizontal framing, stable shots"
    style_notes = {
        "b-roll-heavy": "Minimize talking-head, maximize action shots",
        "screen-record": "Focus on screen captures with cursor movement",
    }
    guidelines = [framing]
    if args.visual_style in style_notes:
        guidelines.append(style_notes[args.visual_style])

    return f"""Create a detailed visual storyboard from this video script.

**Script:**
{args.script}

**Platform:** {args.platform}
**Visual Style:** {args.visual_style}

Return JSON:
{{
  "shots": [
    {{
      "shotNumber": 1,
      "timestamp": "00:00",
      "duration": 5,
      "shotType": "wide/medium/close-up/extreme-close-up",
      "cameraAngle": "eye-level/high-angle/low-angle/dutch-tilt",
      "cameraMovement": "static/pan/tilt/dolly/zoom",
      "subject": "What's in frame",
      "lighting": "Natural/studio/dramatic/soft",
      "composition": "Rule of thirds description",
      "visualNotes": "Detailed description for videographer",
      "thumbnail": "AI image prompt for this shot (for pre-viz)"
    }}
  ],
  "equipmentNeeded": ["camera", "tripod", "lighting"],
  "locations": ["home office", "outdoor park"],
  "props": ["laptop", "coffee mug"]
}}

Platform-specific guidelines:
{chr(10).join(f"- {line}" for line in guidelines)}

Generate complete storyboard now."""


async def generate_storyboard(args: GenerateStoryboardArgs, ctx: ToolContext) -> dict:
    api_key = ctx.settings.require(GEMINI_API_KEY)

    ctx.log.info("Generating storyboard", meta={"platform": args.platform, "style": args.visual_style})
    text = await ctx.providers.text.generate(build_storyboard_prompt(args), api_key)

    storyboard = ctx.extract(text, "object")
    shots = storyboard.get("shots") if isinstance(storyboard, dict) else None
    ctx.log.info("Storyboard generated", meta={"shots": len(shots) if isinstance(shots, list) else 0})
    return storyboard


async def generate_voiceover(args: GenerateVoiceoverArgs, ctx: ToolContext) -> dict:
    synthesizer = ctx.providers.speech[args.provider]
    api_key = ctx.settings.require(synthesizer.credential, synthesizer.credential_hint)

    ctx.log.info("Generating voiceover", meta={"provider": args.provider, "voice": args.voice})
    audio = await synthesizer.synthesize(args.script, args.voice, api_key)

    output_path = ctx.settings.artifact_path("voiceover", ctx.trace_id, args.format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(audio)
    ctx.log.info("Voiceover generated", meta={"provider": args.provider, "path": str(output_path), "size": len(audio)})

    result = {
        "success": True,
        "audioPath": str(output_path),
        "provider": args.provider,
        "duration": len(args.script) // CHARS_PER_SECOND,
        "format": args.format,
    }
    if args.provider == "huggingface":
        result["note"] = "For production quality, use ElevenLabs (set ELEVENLABS_API_KEY)"
    return result
