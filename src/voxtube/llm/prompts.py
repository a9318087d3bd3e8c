"""Summary prompt and markdown-to-speech conversion."""

import re

from ..cache.models import VideoMetadata

SUMMARIZE_PROMPT = """You are a YouTube video summarizer that produces clear, actionable summaries.

Given this video transcript, produce a summary in the following format:

## 📺 {title}

**Duration:** {duration} | **Channel:** {channel}

### 🎯 TL;DR
> [1-2 sentence summary of the main point]

### 🔑 Key Points
1. [First major point]
2. [Second major point]
3. [Third major point]
[4-6 points max]

### 💡 Notable Insights
- [Interesting quote or observation]
- [Counterintuitive claim]

### ⚡ Action Items (if applicable)
- [ ] [Something to try]
- [ ] [Something to research]

### 🔗 Related
- Connects to: [topics or concepts]

Guidelines:
- Be concise - for quick consumption
- Highlight surprises - what's non-obvious
- Skip filler - intros, outros, sponsor reads
- Preserve nuance - don't oversimplify complex points
- If no action items are applicable, omit that section
- Output ONLY the summary, no explanations or preamble"""


def build_prompt(metadata: VideoMetadata | None = None) -> str:
    """Fill the summary template with the video's metadata."""
    metadata = metadata or VideoMetadata()
    return (
        SUMMARIZE_PROMPT.replace("{title}", metadata.title or "Unknown Video")
        .replace("{duration}", metadata.duration or "Unknown")
        .replace("{channel}", metadata.channel or "Unknown Channel")
    )


def build_full_prompt(transcript: str, metadata: VideoMetadata | None = None) -> str:
    """Prompt plus transcript, for providers that take a single text input."""
    return f"{build_prompt(metadata)}\n\nTRANSCRIPT:\n{transcript}".strip()


_SPEECH_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"## 📺\s*"), "Video: "),
    (re.compile(r"### 🎯 TL;DR"), "TL;DR:"),
    (re.compile(r"### 🔑 Key Points"), "Key Points:"),
    (re.compile(r"### 💡 Notable Insights"), "Notable Insights:"),
    (re.compile(r"### ⚡ Action Items.*$", re.MULTILINE), "Action Items:"),
    (re.compile(r"### 🔗 Related"), "Related Topics:"),
    (re.compile(r"[📺🎯🔑💡⚡🔗]"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r">\s*"), ""),
    (re.compile(r"- \[ \]"), ""),
    (re.compile(r"^\d+\.\s*", re.MULTILINE), ""),
    (re.compile(r"^-\s*", re.MULTILINE), ""),
    (re.compile(r"\|"), ","),
    (re.compile(r"\n{3,}"), "\n\n"),
]


def summary_to_speech(summary: str) -> str:
    """Convert summary markdown to TTS-friendly plain text."""
    for pattern, replacement in _SPEECH_RULES:
        summary = pattern.sub(replacement, summary)
    return summary.strip()
