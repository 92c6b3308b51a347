"""
Batch command line: look up a list of product names one after another and
write the results as JSON, plus a CSV/XLSX summary for a quick review.

    ledenicheur-scraper "Apple MacBook Pro M2" --output results.json
    ledenicheur-scraper --input products.txt --dev
    ledenicheur-scraper --candidates "RTX 4070 Super"
"""

from pathlib import Path
from typing import Optional
import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from .browser import BH
from .config import Config
from .errors import BotChallengeError
from .models import ProductDetails
from .pipeline import LedenicheurScraper

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "ledenicheur_products.json"
QUERY_PAUSE_MS = (2000, 5000)

SUMMARY_FIELDS = [
    "query", "product_url", "page_title", "specification_count",
    "image_count", "lowest_price_in_period", "lowest_price_date",
    "lowest_price_today", "lowest_price_today_shop", "median_price_estimate",
]

XLSX_HEADERS = {
    "query": ("Search Query", 45),
    "product_url": ("Product URL", 70),
    "page_title": ("Page Title", 50),
    "specification_count": ("Specifications", 15),
    "image_count": ("Images", 10),
    "lowest_price_in_period": ("Lowest Price (3 mois)", 20),
    "lowest_price_date": ("Lowest Price Date", 25),
    "lowest_price_today": ("Lowest Price Today", 20),
    "lowest_price_today_shop": ("Shop", 25),
    "median_price_estimate": ("Median Estimate", 18),
}


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    logging.basicConfig(level=level,
                        format="%(asctime)s - %(levelname)s - %(message)s")
    return logging.getLogger("ledenicheur_scraper")


def load_queries(path: str) -> list[str]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Not found: {path}")
    qs = [l.strip() for l in p.read_text(encoding="utf-8").split("\n")
          if l.strip()]
    if not qs:
        raise ValueError("Empty input")
    logger.info(f"Loaded {len(qs)} queries")
    return qs


def summary_row(query: str, details: Optional[ProductDetails]) -> dict:
    """One flat CSV/XLSX row; blank cells when nothing was found."""
    row = {k: "" for k in SUMMARY_FIELDS}
    row["query"] = query
    if details is None:
        return row
    row.update(
        product_url=details.url,
        page_title=details.page_title or "",
        specification_count=len(details.specifications),
        image_count=len(details.image_urls),
    )
    ph = details.price_history
    if ph is not None:
        row.update(
            lowest_price_in_period=ph.lowest_price_in_period or "",
            lowest_price_date=ph.lowest_price_date or "",
            lowest_price_today=ph.lowest_price_today or "",
            lowest_price_today_shop=ph.lowest_price_today_shop or "",
            median_price_estimate=ph.median_price_estimate or "",
        )
    return row


# ============================================================================
# OUTPUT
# ============================================================================

def write_json(path: Path, records: list[dict]):
    path.write_text(json.dumps(records, ensure_ascii=False, indent=2),
                    encoding="utf-8")
    logger.info(f"JSON saved: {path}")


def write_csv(path: Path, fields: list[str], rows: list[dict]):
    """Write CSV with space after each comma for readability."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(", ".join(fields) + "\n")
        for row in rows:
            values = []
            for field in fields:
                val = str(row.get(field, ""))
                if "," in val or '"' in val:
                    val = '"' + val.replace('"', '""') + '"'
                values.append(val)
            f.write(", ".join(values) + "\n")
    logger.info(f"CSV saved: {path}")


def write_xlsx(path: Path, fields: list[str], rows: list[dict]):
    """Write the summary workbook; skipped when openpyxl is not installed."""
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Alignment, Font
    except ImportError:
        logger.info("openpyxl not installed, skipping XLSX.")
        return

    wb = Workbook()
    ws = wb.active
    ws.title = "Ledenicheur Products"

    bold = Font(bold=True)
    wrap = Alignment(wrap_text=True, vertical="top")

    for col, field in enumerate(fields, 1):
        label, width = XLSX_HEADERS.get(field, (field, 20))
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = bold
        ws.column_dimensions[cell.column_letter].width = width

    for r, row in enumerate(rows, 2):
        for c, field in enumerate(fields, 1):
            cell = ws.cell(row=r, column=c, value=row.get(field, ""))
            cell.alignment = wrap

    wb.save(path)
    logger.info(f"XLSX saved: {path}")


def save_results(output: Path, results: list[tuple[str, Optional[ProductDetails]]]):
    write_json(output, [
        {"query": q, "product": d.to_dict() if d else None}
        for q, d in results
    ])
    rows = [summary_row(q, d) for q, d in results]
    write_csv(output.with_suffix(".csv"), SUMMARY_FIELDS, rows)
    write_xlsx(output.with_suffix(".xlsx"), SUMMARY_FIELDS, rows)


# ============================================================================
# RUN
# ============================================================================

async def run_batch(scraper: LedenicheurScraper, queries: list[str],
                    pause_ms: tuple[int, int] = QUERY_PAUSE_MS
                    ) -> tuple[list[tuple[str, Optional[ProductDetails]]], bool]:
    """Scrape every query in order.

    Returns the results and whether the run was cut short by a bot
    challenge; results gathered before the challenge are kept.
    """
    results = []
    for i, q in enumerate(queries, 1):
        logger.info(f"{'=' * 60}")
        logger.info(f"[{i}/{len(queries)}]: {q}")
        logger.info(f"{'=' * 60}")

        try:
            details = await scraper.scrape(q)
        except BotChallengeError as e:
            logger.error(f"Stopping the batch: {e}")
            return results, True
        except Exception as e:
            logger.error(f"Error: {q}: {e}")
            details = None
        results.append((q, details))

        if i < len(queries):
            await BH.pause(*pause_ms)
    return results, False


async def list_candidates(scraper: LedenicheurScraper,
                          queries: list[str]) -> dict[str, list[dict]]:
    out = {}
    for q in queries:
        ranked = await scraper.search_candidates(q)
        out[q] = [sc.to_dict() for sc in ranked]
    return out


def build_config(args: argparse.Namespace) -> Config:
    config = Config.development() if args.dev else Config.from_env()
    if args.headful:
        config = config.with_overrides(headless=False)
    if args.threshold is not None:
        config = config.with_overrides(similarity_threshold=args.threshold)
    return config


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ledenicheur-scraper",
        description="Look products up on ledenicheur.fr")
    parser.add_argument("names", nargs="*", help="product names to look up")
    parser.add_argument("--input", help="file with one product name per line")
    parser.add_argument("--output", default=DEFAULT_OUTPUT,
                        help="JSON output; .csv and .xlsx summaries are "
                             "written next to it")
    parser.add_argument("--candidates", action="store_true",
                        help="print the scored search results instead of "
                             "scraping")
    parser.add_argument("--dev", action="store_true",
                        help="development preset: headed browser, long "
                             "timeouts")
    parser.add_argument("--headful", action="store_true")
    parser.add_argument("--threshold", type=float,
                        help="minimum similarity to accept a match")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    queries = list(args.names)
    if args.input:
        queries += load_queries(args.input)
    if not queries:
        logger.error("No product name given (positional names or --input)")
        return 1

    scraper = LedenicheurScraper(build_config(args))
    try:
        if args.candidates:
            found = asyncio.run(list_candidates(scraper, queries))
            print(json.dumps(found, ensure_ascii=False, indent=2))
            return 0

        results, blocked = asyncio.run(run_batch(scraper, queries))
        save_results(Path(args.output), results)
    except BotChallengeError as e:
        logger.error(f"Fatal: {e}")
        return 2

    found = sum(1 for _, d in results if d is not None)
    logger.info(f"Done! {found}/{len(queries)} products found. "
                f"Results: {args.output}")
    return 2 if blocked else 0


if __name__ == "__main__":
    sys.exit(main())
