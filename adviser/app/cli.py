import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

from adviser.config import load_settings
from adviser.contracts.errors import AdviserError, InputError
from adviser.contracts.output_manifest import OutputMode
from adviser.core.runner import AdviseRequest, AdviserRunner
from adviser.infrastructure.llm.adapter import LLMAdapter
from adviser.logging_setup import setup_logging
from adviser.prompts.registry import PromptNotFound, PromptRegistry

logger = logging.getLogger(__name__)


def _mode(raw: str) -> OutputMode:
    try:
        return OutputMode.parse(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "adviser",
        description="Send a document to an LLM agent and save its structured critique.",
    )

    prompt = parser.add_mutually_exclusive_group(required=True)
    prompt.add_argument("--prompt-file", "-p", type=Path, help="System prompt file")
    prompt.add_argument("--persona", help="Built-in prompt: " + ", ".join(PromptRegistry().personas()))

    parser.add_argument("--input", "-i", type=Path, required=True, help="File with the content to analyze")
    parser.add_argument(
        "--mode", "-m",
        type=_mode,
        default=OutputMode.SYMBOLIC,
        help="symbolic (default, alias: aisp), human, or structured (alias: workflow)",
    )
    parser.add_argument("--output", "-o", type=Path, help="Explicit output file (generated if omitted)")
    parser.add_argument("--output-dir", type=Path, help="Output directory (default: docs/reviews)")
    parser.add_argument("--timeout", "-t", type=float, help="Agent timeout in seconds")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def read_text_file(path: Path, label: str) -> str:
    path = path.expanduser().resolve()
    if not path.exists():
        raise InputError(f"{label} file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Error reading {label.lower()} file {path}: {e}") from e


def load_system_prompt(args: argparse.Namespace) -> str:
    if args.prompt_file is not None:
        prompt = read_text_file(args.prompt_file, "Prompt")
    else:
        try:
            prompt = PromptRegistry().persona_prompt(args.persona)
        except PromptNotFound as e:
            raise InputError(str(e)) from e

    if not prompt.strip():
        raise InputError("Prompt file is empty.")
    return prompt


def load_context(path: Path, max_chars: int) -> str:
    context = read_text_file(path, "Input")
    if not context:
        raise InputError("Input file is empty.")
    if len(context) > max_chars:
        raise InputError(f"Input file too large. Please limit input to {max_chars:,} characters.")
    return context


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cancel_event = threading.Event()

    try:
        settings = load_settings()
        setup_logging(args.log_level or settings.log_level)

        system_prompt = load_system_prompt(args)
        context = load_context(args.input, settings.max_input_chars)

        adapter = LLMAdapter.from_config(settings.models_config_path, settings.active_profile)
        runner = AdviserRunner(adapter, output_dir_override=settings.output_dir_override)

        request = AdviseRequest(
            system_prompt=system_prompt,
            context=context,
            mode=args.mode,
            output_file=args.output,
            output_dir=args.output_dir,
            timeout_seconds=args.timeout or settings.timeout_seconds,
            cancel_event=cancel_event,
        )

        print(f"[Adviser] Starting analysis in {args.mode.value} mode...")
        outcome = runner.run(request)

    except KeyboardInterrupt:
        cancel_event.set()
        print("[Adviser] Error (agent): cancelled, no output written", file=sys.stderr)
        return 130

    except AdviserError as e:
        logger.debug("Adviser failed", exc_info=True)
        print(f"[Adviser] Error ({e.stage}): {e}", file=sys.stderr)
        return 1

    print(f"[Adviser] Verdict: {outcome.verdict.verdict.value}")
    print(f"[Adviser] Output manifest: {outcome.manifest_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
