# =============================================================================
# core/export.py  -  Editing-project export (FCPXML, Premiere XML, EDL)
# =============================================================================
#
# render_project() is a pure templating function: storyboard + optional
# voiceover path + format  ->  document text.  Nothing checks the document
# against Final Cut / Premiere / Resolve; importing it is the caller's job.
#
# Timing comes from the storyboard's shots (each shot's "duration", in
# seconds).  A storyboard without usable shots is treated as one 60-second
# sequence (XML) or one 10-second black edit (EDL).
# =============================================================================

import os
from xml.sax.saxutils import escape

from core.contracts import ToolContext
from core.models import ExportProjectArgs, Storyboard

FPS = 30
DEFAULT_SEQUENCE_SECONDS = 60
DEFAULT_EDIT_SECONDS = 10
PROJECT_NAME = "AI Generated Video"

FORMAT_EXTENSIONS = {"fcpxml": "fcpxml", "premiere-xml": "xml", "davinci-xml": "edl"}
FORMAT_APPLICATIONS = {
    "fcpxml": "Final Cut Pro X",
    "premiere-xml": "Adobe Premiere Pro",
    "davinci-xml": "DaVinci Resolve",
}


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def _comment(value: str) -> str:
    return value.replace("--", "- -")


def timecode(frames: int) -> str:
    """Frames at 30 fps -> HH:MM:SS:FF."""
    seconds, frame = divmod(frames, FPS)
    minutes, second = divmod(seconds, 60)
    hours, minute = divmod(minutes, 60)
    return f"{hours:02d}:{minute:02d}:{second:02d}:{frame:02d}"


def shot_durations(storyboard: Storyboard) -> list[tuple[str, float]]:
    """(label, seconds) for every shot that has a positive numeric duration."""
    shots = []
    for index, shot in enumerate(storyboard.shots or [], start=1):
        if not isinstance(shot, dict):
            continue
        duration = shot.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration <= 0:
            continue
        label = f"Shot {shot.get('shotNumber', index)}"
        subject = shot.get("subject")
        if subject:
            label = f"{label}: {subject}"
        shots.append((label, float(duration)))
    return shots


def total_seconds(storyboard: Storyboard) -> float:
    return sum(duration for _, duration in shot_durations(storyboard)) or DEFAULT_SEQUENCE_SECONDS


def render_fcpxml(storyboard: Storyboard, voiceover_path, b_roll) -> str:
    duration = f"{total_seconds(storyboard):g}s"
    title = _attr(storyboard.title or "Untitled")

    resources = ['    <format id="r1" name="FFVideoFormat1080p30" frameDuration="1001/30000s" width="1920" height="1080"/>']
    spine = []
    if voiceover_path:
        resources.append(
            f'    <asset id="r2" src="file://{_attr(voiceover_path)}" start="0s" duration="{duration}" hasAudio="1"/>'
        )
        spine.append(f'            <audio ref="r2" offset="0s" duration="{duration}"/>')
    spine.extend(f"            <!-- B-roll: {_comment(item)} -->" for item in b_roll or [])

    return "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<!DOCTYPE fcpxml>",
        '<fcpxml version="1.9">',
        "  <resources>",
        *resources,
        "  </resources>",
        "  <library>",
        f'    <event name="{PROJECT_NAME}">',
        f'      <project name="{title}">',
        f'        <sequence format="r1" duration="{duration}">',
        "          <spine>",
        *spine,
        "          </spine>",
        "        </sequence>",
        "      </project>",
        "    </event>",
        "  </library>",
        "</fcpxml>",
        "",
    ])


def render_premiere_xml(storyboard: Storyboard, voiceover_path, b_roll) -> str:
    frames = round(total_seconds(storyboard) * FPS)
    name = escape(storyboard.title or PROJECT_NAME)

    audio = ["      <audio>"]
    if voiceover_path:
        audio.append(
            f"        <track><clipitem><file><pathurl>file://{escape(voiceover_path)}</pathurl></file></clipitem></track>"
        )
    audio.append("      </audio>")

    return "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<xmeml version="5">',
        "  <sequence>",
        f"    <name>{name}</name>",
        f"    <duration>{frames}</duration>",
        "    <rate>",
        f"      <timebase>{FPS}</timebase>",
        "    </rate>",
        "    <media>",
        *audio,
        "    </media>",
        *(f"    <!-- B-roll: {_comment(item)} -->" for item in b_roll or []),
        "  </sequence>",
        "</xmeml>",
        "",
    ])


def edl_event(number: int, reel: str, track: str, source_frames: int, record_in: int, clip_name: str) -> list[str]:
    """One fixed-width edit line plus its clip-name comment."""
    line = (
        f"{number:03d}  {reel:<8} {track:<5} {'C':<8} "
        f"{timecode(0)} {timecode(source_frames)} "
        f"{timecode(record_in)} {timecode(record_in + source_frames)}"
    )
    return [line, f"* FROM CLIP NAME: {clip_name}"]


def edl_title(storyboard: Storyboard) -> str:
    """The title on one line; EDL readers treat every line as a record."""
    return " ".join((storyboard.title or "").split()) or PROJECT_NAME


def render_edl(storyboard: Storyboard, voiceover_path, b_roll) -> str:
    lines = [f"TITLE: {edl_title(storyboard)}", "FCM: NON-DROP FRAME", ""]

    shots = shot_durations(storyboard)
    record = 0
    number = 0
    if not shots:
        number += 1
        lines += edl_event(number, "BL", "V", DEFAULT_EDIT_SECONDS * FPS, 0, "Voiceover")
        record = DEFAULT_EDIT_SECONDS * FPS
    for label, seconds in shots:
        number += 1
        frames = round(seconds * FPS)
        lines += edl_event(number, "AX", "V", frames, record, label)
        record += frames

    if voiceover_path:
        number += 1
        lines += edl_event(number, "AX", "A", record, 0, os.path.basename(voiceover_path))
    return "\n".join(lines) + "\n"


_RENDERERS = {
    "fcpxml": render_fcpxml,
    "premiere-xml": render_premiere_xml,
    "davinci-xml": render_edl,
}


def render_project(storyboard: Storyboard, format: str, voiceover_path=None, b_roll=None) -> str:
    return _RENDERERS[format](storyboard, voiceover_path, b_roll)


async def export_editing_project(args: ExportProjectArgs, ctx: ToolContext) -> dict:
    ctx.log.info("Exporting editing project", meta={"format": args.format})

    document = render_project(args.storyboard, args.format, args.voiceover_path, args.b_roll_suggestions)

    output_path = ctx.settings.artifact_path("project", ctx.trace_id, FORMAT_EXTENSIONS[args.format])
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")
    ctx.log.info("Project exported", meta={"path": str(output_path), "format": args.format})

    return {
        "success": True,
        "projectPath": str(output_path),
        "format": args.format,
        "instructions": f"Import {output_path} into {FORMAT_APPLICATIONS[args.format]}",
    }
