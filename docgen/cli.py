"""
CLI - Command-line interface for the documentation generator.

Runs the generation pipeline over local files with an in-memory store:
1. document  - transcripts -> one documentation artifact
2. screens   - list the screens of a screens_prompts document
3. wireframe - screens_prompts document -> wireframes (tree, html or preview)
4. estimate  - chiffrage JSON + daily rate -> priced ledger
5. extract   - .txt / .pdf / .docx -> plain text
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from .core.config import AppConfig, WireframeFormat, UNLIMITED_CREDITS, load_config
from .core.errors import DocGenError
from .estimate import compile_estimate
from .export import ledger_to_xlsx, markdown_to_docx
from .generator import GenerationOrchestrator, ScreenStatus
from .ingest import extract_file
from .llm import MockLLMClient, MockUIClient, V0Client, create_client_from_config
from .models.documents import DocumentType, GeneratedDocument, Transcription
from .parser import parse_screens, parse_screens_permissive
from .prompts import PROMPTS, WIREFRAME_PROMPT, HTML_WIREFRAME_PROMPT
from .storage import InMemoryStore, DOCUMENTS, PROFILES, PROJECTS, TRANSCRIPTIONS
from .utils.logger import setup_logging, get_logger, log_exception

logger = get_logger(__name__)

LOCAL_USER = "local-user"
LOCAL_PROJECT = "local-project"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="docgen",
        description="Generate documentation and wireframes from meeting transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s document user_stories meeting1.docx meeting2.pdf -o stories.md
  %(prog)s document chiffrage meeting.txt --daily-rate 550 -o estimate.json
  %(prog)s screens screens.md
  %(prog)s wireframe screens.md --format html --screens 0 1 2 -o wireframes/
  %(prog)s estimate estimate.json --daily-rate 550
  %(prog)s estimate estimate.json --daily-rate 550 --xlsx chiffrage.xlsx
        """,
    )

    parser.add_argument("-c", "--config", type=Path, help="Configuration file (YAML)")
    parser.add_argument("--mock-llm", action="store_true", help="Use mock backends (no API calls)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    doc = sub.add_parser("document", help="Generate a document from transcripts")
    doc.add_argument("type", choices=[t.value for t in DocumentType], help="Document type")
    doc.add_argument("transcripts", type=Path, nargs="+", help="Transcript files (.txt, .md, .pdf, .docx)")
    doc.add_argument("-n", "--project-name", default="Projet", help="Project name")
    doc.add_argument("--daily-rate", type=float, help="Daily rate (chiffrage only)")
    doc.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    doc.add_argument("--docx", type=Path, help="Also export the document as .docx")

    screens = sub.add_parser("screens", help="List the screens of a screens_prompts document")
    screens.add_argument("document", type=Path, help="screens_prompts markdown file")
    screens.add_argument("--permissive", action="store_true", help="Use the permissive parser")

    wf = sub.add_parser("wireframe", help="Generate wireframes from a screens_prompts document")
    wf.add_argument("document", type=Path, help="screens_prompts markdown file")
    wf.add_argument(
        "-f", "--format",
        choices=[f.value for f in WireframeFormat],
        help="Wireframe variant (default: from config)",
    )
    wf.add_argument("--screens", type=int, nargs="*", help="Screen indexes (default: all)")
    wf.add_argument("-o", "--output", type=Path, help="Output file, or directory for html")

    est = sub.add_parser("estimate", help="Price a chiffrage JSON payload")
    est.add_argument("estimate", type=Path, help="chiffrage JSON file")
    est.add_argument("--daily-rate", type=float, help="Daily rate (default: from config)")
    est.add_argument("--strict-complexity", action="store_true", help="Reject unlisted complexity multipliers")
    est.add_argument("-o", "--output", type=Path, help="Output JSON file (default: stdout)")
    est.add_argument("--xlsx", type=Path, help="Also export the estimate as .xlsx")

    ext = sub.add_parser("extract", help="Extract plain text from a source document")
    ext.add_argument("file", type=Path, help="Source document (.txt, .md, .pdf, .docx)")

    return parser.parse_args(argv)


def _mock_response(prompt: str) -> str:
    if prompt.startswith(WIREFRAME_PROMPT):
        return json.dumps({"screens": []})
    if prompt.startswith(PROMPTS[DocumentType.CHIFFRAGE]):
        return json.dumps({"sections": [], "roles": []})
    if prompt.startswith(HTML_WIREFRAME_PROMPT):
        return '<div class="p-4">Mock wireframe</div>'
    return "# Mock document\n\nGenerated without calling a backend."


def build_orchestrator(config: AppConfig, mock: bool = False) -> GenerationOrchestrator:
    """Orchestrator over a fresh in-memory store holding one local user and project."""
    store = InMemoryStore()
    store.insert(PROFILES, {"id": LOCAL_USER, "plan": "local", "credits_remaining": UNLIMITED_CREDITS})

    if mock:
        llm_client = MockLLMClient()
        llm_client.set_response_function(_mock_response)
        ui_client = MockUIClient()
        logger.info("Using mock backends")
    else:
        llm_client = create_client_from_config(config.generation.llm)
        ui_client = V0Client(timeout=config.generation.llm.timeout)
        logger.info(f"Using {llm_client.provider_name} backend ({llm_client.model_id})")

    return GenerationOrchestrator(store, llm_client=llm_client, ui_client=ui_client, config=config)


def _create_project(orchestrator: GenerationOrchestrator, name: str) -> None:
    orchestrator.store.insert(PROJECTS, {"id": LOCAL_PROJECT, "user_id": LOCAL_USER, "name": name})


def _write(text: str, output: Optional[Path]) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        logger.info(f"Output written to: {output}")
    else:
        print(text)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def cmd_document(args: argparse.Namespace, orchestrator: GenerationOrchestrator) -> int:
    _create_project(orchestrator, args.project_name)

    for path in args.transcripts:
        content = extract_file(path)
        transcript = Transcription(project_id=LOCAL_PROJECT, content=content, filename=path.name)
        orchestrator.store.insert(TRANSCRIPTIONS, transcript.to_record())
        logger.info(f"Loaded transcript {path.name} ({len(content)} characters)")

    document = orchestrator.generate_document(LOCAL_USER, LOCAL_PROJECT, args.type, daily_rate=args.daily_rate)
    _write(document.content, args.output)

    if args.docx:
        if document.type.is_structured:
            logger.warning("Word export only applies to markdown documents")
        else:
            args.docx.write_bytes(markdown_to_docx(document.content, document.type.label))
            logger.info(f"Word document written to: {args.docx}")
    return 0


def cmd_screens(args: argparse.Namespace) -> int:
    text = args.document.read_text(encoding="utf-8")
    if args.permissive:
        screens = [
            {"index": i, "name": s.name, "description": s.description, "elements": s.elements}
            for i, s in enumerate(parse_screens_permissive(text))
        ]
    else:
        screens = [s.to_dict() for s in parse_screens(text)]
    print(_dump(screens))
    return 0


def cmd_wireframe(args: argparse.Namespace, orchestrator: GenerationOrchestrator) -> int:
    _create_project(orchestrator, args.document.stem)
    document = GeneratedDocument(
        project_id=LOCAL_PROJECT,
        type=DocumentType.SCREENS_PROMPTS,
        content=args.document.read_text(encoding="utf-8"),
    )
    orchestrator.store.insert(DOCUMENTS, document.to_record())

    producer = orchestrator.producer_for(args.format)

    if not producer.per_screen:
        wireframe = orchestrator.generate_wireframe(LOCAL_USER, LOCAL_PROJECT, wireframe_format=producer.format)
        _write(_dump(wireframe.to_record()), args.output)
        return 0

    indexes = args.screens
    if not indexes:
        indexes = [s.index for s in parse_screens(document.content)] or [0]

    def report(index: int, status: ScreenStatus) -> None:
        logger.info(f"Screen {index}: {status.value}")

    result = orchestrator.generate_screen_wireframes(
        LOCAL_USER, LOCAL_PROJECT, indexes, producer.format, on_status=report,
    )

    if producer.format is WireframeFormat.HTML and args.output:
        args.output.mkdir(parents=True, exist_ok=True)
        for index, wireframe in sorted(result.results.items()):
            path = args.output / f"screen_{index:02d}.html"
            path.write_text(wireframe.html_content, encoding="utf-8")
            logger.info(f"Wrote {path}")
        print(_dump(result.to_dict()))
    else:
        summary = result.to_dict()
        summary["artifacts"] = {i: a.to_record() for i, a in sorted(result.results.items())}
        _write(_dump(summary), args.output)

    return 0 if result.success else 1


def cmd_estimate(args: argparse.Namespace, config: AppConfig) -> int:
    daily_rate = args.daily_rate if args.daily_rate is not None else config.estimate.default_daily_rate
    if daily_rate is None:
        logger.error("A daily rate is required (--daily-rate or estimate.default_daily_rate)")
        return 1

    if args.strict_complexity:
        config.estimate.strict_complexity = True

    ledger = compile_estimate(args.estimate.read_text(encoding="utf-8"), daily_rate, config.estimate)
    _write(_dump(ledger.to_dict()), args.output)
    if args.xlsx:
        args.xlsx.write_bytes(ledger_to_xlsx(ledger))
        logger.info(f"Excel workbook written to: {args.xlsx}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        setup_logging(level="INFO")
        logger.error(str(e))
        return 1

    setup_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        format_string=config.logging.format,
        log_file=config.logging.file,
    )

    try:
        if args.command == "extract":
            print(extract_file(args.file))
            return 0
        if args.command == "screens":
            return cmd_screens(args)
        if args.command == "estimate":
            return cmd_estimate(args, config)

        orchestrator = build_orchestrator(config, mock=args.mock_llm)
        if args.command == "document":
            return cmd_document(args, orchestrator)
        return cmd_wireframe(args, orchestrator)

    except DocGenError as e:
        logger.error(f"[{e.kind}] {e.detail}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except Exception as e:
        log_exception(logger, "Unexpected error", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
