# src/copydeck/core/handlers/scrape_handler.py
import argparse
import logging
import time
from pathlib import Path
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
from scraper.rules import ExtractionRules
from scraper.services.html_scrape_service import HtmlScrapeService

logger = logging.getLogger(__name__)

scrape_help_text = """
SCRAPE:
  scrape <path> [--analyze] [--format csv|xlsx] [--out DIR]
                      Extract copy from an HTML file or a directory of HTML
                      files, detect issues and export the corrections sheet,
                      the colour-coded report and the JSON report.
                      --analyze classifies items with Azure OpenAI first
                      (default from ANALYZE_HTML).
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scrape", description="Scrape and audit HTML copy.")
    parser.add_argument("path", type=str, help="HTML file or directory.")
    parser.add_argument("--analyze", action="store_true", default=None, help="Classify items with Azure OpenAI.")
    parser.add_argument("--format", choices=["csv", "xlsx"], default="csv", help="Corrections sheet format.")
    parser.add_argument("--out", type=str, default=None, help="Output directory.")
    return parser


def handle_scrape(args: List[str], ctx: Optional[ShellContext] = None) -> int:
    """Handler for the 'scrape' command."""
    try:
        parsed_args = _build_parser().parse_args(args)
    except SystemExit:
        return 1

    output_dir = PathUtils.get_output_dir(parsed_args.out) if parsed_args.out else (ctx or ShellContext()).output_dir
    analyze = parsed_args.analyze
    if analyze is None:
        analyze = config_manager.get_env_flag("ANALYZE_HTML", False)

    classifier = None
    if analyze:
        classifier = ContentClassifierService.from_environment()
        if classifier is None:
            print("⚠️  Azure OpenAI is not configured; continuing without classification.")

    service = HtmlScrapeService(ExtractionRules.from_config(config_manager.get_nested("scraper")))
    engine = QNGINE(rules=RuleSet.from_config(config_manager.get_nested("auditor")))
    controller = AuditController(output_dir, engine=engine, classifier=classifier)

    start_time = time.perf_counter()
    try:
        result = service.scrape(Path(parsed_args.path))
        if not result.items:
            print(f"⚠️  No text-bearing elements found in {parsed_args.path}.")

        controller.run_audit(result)
        outputs = controller.export(result, sheet_format=parsed_args.format)
    except CopydeckError as e:
        logger.error("Scrape failed: %s", e)
        print(f"❌ {e}")
        return 1
    duration = time.perf_counter() - start_time

    stats = result.stats
    print(f"✅ Scraped {stats.total_items} items from {result.files_scraped} file(s) in {duration:.2f}s.")
    print(f"   Unique strings: {stats.unique_strings}, duplicates: {len(stats.duplicates)}")
    print_severity_summary(controller.summary())
    print_outputs(outputs)
    return 0
