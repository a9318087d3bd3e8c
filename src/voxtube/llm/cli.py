"""Summarizers that shell out to locally installed LLM CLIs.

The prompt is sent over stdin to stay clear of argv size limits with long
transcripts.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from ..cache.models import VideoMetadata
from ..config import LLMConfig
from ..errors import SummarizerError
from .base import Summarizer, SummaryResult
from .prompts import build_full_prompt

logger = logging.getLogger(__name__)


async def _run(
    argv: list[str], stdin: bytes, timeout: float, env: dict[str, str] | None = None
) -> tuple[int, str, str]:
    """Run argv with stdin, returning (exit code, stdout, stderr)."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except OSError as e:
        raise SummarizerError(
            f"{argv[0]} failed to start. Check that it is installed and "
            f"authenticated. Details: {e}",
            e,
        ) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(stdin), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise SummarizerError(f"{argv[0]} timed out after {timeout:g}s", e) from e

    return (
        proc.returncode or 0,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


class ClaudeCliSummarizer(Summarizer):
    """Summarizer using `claude --print --model sonnet`."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    async def summarize(
        self, transcript: str, metadata: VideoMetadata | None = None
    ) -> SummaryResult:
        # The CLI refuses to run nested inside another session when CLAUDECODE is set
        env = {k: v for k, v in os.environ.items() if k != "CLAUDECODE"}
        argv = [self.config.claude_cli_path, "--print", "--model", "sonnet"]

        code, stdout, stderr = await _run(
            argv,
            build_full_prompt(transcript, metadata).encode("utf-8"),
            self.config.timeout_ms / 1000,
            env=env,
        )

        if code != 0:
            error_text = stderr.strip() or stdout.strip() or f"exit code {code}"
            raise SummarizerError(
                f"Claude CLI failed (exit {code}): {error_text}. If this persists, "
                "run `claude --print --model sonnet` in your terminal to verify auth."
            )
        if not stdout.strip():
            raise SummarizerError("Claude CLI returned empty output")

        return SummaryResult(summary=stdout.strip(), model="claude-sonnet")


class CodexSummarizer(Summarizer):
    """Summarizer using `codex exec - --ephemeral -o <file>`."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    async def summarize(
        self, transcript: str, metadata: VideoMetadata | None = None
    ) -> SummaryResult:
        fd, out_name = tempfile.mkstemp(prefix="voxtube_codex_", suffix=".txt")
        os.close(fd)
        out_path = Path(out_name)

        try:
            argv = [self.config.codex_cli_path, "exec", "-", "--ephemeral", "-o", out_name]
            code, stdout, stderr = await _run(
                argv,
                build_full_prompt(transcript, metadata).encode("utf-8"),
                self.config.timeout_ms / 1000,
            )
            try:
                output = out_path.read_text(encoding="utf-8").strip()
            except OSError:
                output = ""
            if not output:
                output = stdout.strip()
        finally:
            out_path.unlink(missing_ok=True)

        if code != 0:
            error_text = stderr.strip() or output or f"exit code {code}"
            raise SummarizerError(
                f"Codex CLI failed (exit {code}): {error_text}. If this persists, "
                'run `codex exec "test"` to verify auth.'
            )
        if not output:
            raise SummarizerError("Codex CLI returned empty output")

        return SummaryResult(summary=output, model="codex")
