# src/copydeck/core/handlers/figma_handler.py
import argparse
import logging
import time
from typing import List, Optional

from auditor.controllers.audit_controller import AuditController
from auditor.qngine import QNGINE
from auditor.rules.core import RuleSet
from auditor.services.classifier_service import ContentClassifierService
from copydeck.core.context.shell_context import ShellContext
from copydeck.core.utils.console_output import print_outputs, print_severity_summary
from copydeck.core.managers.config_manager import config_manager
from copydeck.core.utils.path_utils import PathUtils
from copydeck.errors import CopydeckError
from scraper.services.figma_scrape_service import FIGMA_API_URL, FigmaFetchService, FigmaScrapeService

logger = logging.getLogger(__name__)

figma_help_text = """
FIGMA:
  figma [<file_key>] [--no-analyze] [--format csv|xlsx] [--out DIR]
                      Fetch a Figma file (key from the argument or
                      FIGMA_FILE_KEY), extract every text node, classify
                      it and write the sheet and reports.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="figma", description="Extract and audit copy from a Figma file.")
    parser.add_argument("file_key", nargs="?", default=None, help="Figma file key.")
    parser.add_argument("--no-analyze", action="store_true", help="Skip Azure OpenAI classification.")
    parser.add_argument("--format", choices=["csv", "xlsx"], default="csv", help="Corrections sheet format.")
    parser.add_argument("--out", type=str, default=None, help="Output directory.")
    return parser


def handle_figma(args: List[str], ctx: Optional[ShellContext] = None) -> int:
    """Handler for the 'figma' command."""
    try:
        parsed_args = _build_parser().parse_args(args)
    except SystemExit:
        return 1

    file_key = parsed_args.file_key or config_manager.get_env("FIGMA_FILE_KEY")
    if not file_key:
        print("❌ No Figma file key given. Pass it as argument or set FIGMA_FILE_KEY.")
        return 1

    output_dir = PathUtils.get_output_dir(parsed_args.out) if parsed_args.out else (ctx or ShellContext()).output_dir

    fetcher = FigmaFetchService(
        access_token=config_manager.get_env("FIGMA_ACCESS_TOKEN"),
        base_url=config_manager.get_nested("figma.base_url", FIGMA_API_URL),
        timeout=float(config_manager.get_nested("figma.timeout", 30)),
    )
    classifier = None if parsed_args.no_analyze else ContentClassifierService.from_environment()
    engine = QNGINE(rules=RuleSet.from_config(config_manager.get_nested("auditor")))
    controller = AuditController(output_dir, engine=engine, classifier=classifier)

    print(f"🎨 Fetching Figma file {file_key}...")
    start_time = time.perf_counter()
    try:
        result = FigmaScrapeService().scrape_file(fetcher, file_key)
        controller.run_audit(result)
        outputs = controller.export(result, sheet_format=parsed_args.format)
    except CopydeckError as e:
        logger.error("Figma run failed: %s", e)
        print(f"❌ {e}")
        return 1
    duration = time.perf_counter() - start_time

    analyzed = sum(1 for a in controller.audited if a.item.is_analyzed)
    print(f"✅ Extracted {len(result.items)} text nodes from '{result.source_name}' in {duration:.2f}s.")
    if classifier is not None:
        print(f"   Analyzed: {analyzed}/{len(result.items)}")
    print_severity_summary(controller.summary())
    print_outputs(outputs)
    return 0
