"""Tests for the batch command line helpers."""

import json
import sys

import pytest
from openpyxl import load_workbook

from ledenicheur_scraper import cli
from ledenicheur_scraper.errors import BotChallengeError
from ledenicheur_scraper.models import (
    PriceHistorySummary,
    ProductDetails,
    Specification,
)

DETAILS = ProductDetails(
    url="https://ledenicheur.fr/product.php?p=2002",
    page_title='Apple MacBook Pro 13" M2',
    specifications=[Specification("Écran", "Taille", "13,3")],
    price_history=PriceHistorySummary(lowest_price_today="1 362,66 €",
                                      lowest_price_today_shop="Amazon.fr",
                                      median_price_estimate="1362,66 €"),
)


class StubScraper:
    """Answers from a dict; exception values are raised instead."""

    def __init__(self, answers: dict):
        self.answers = answers
        self.calls = []

    async def scrape(self, name):
        self.calls.append(name)
        answer = self.answers.get(name)
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestLoadQueries:
    def test_skips_blank_lines(self, tmp_path):
        f = tmp_path / "products.txt"
        f.write_text("Apple MacBook Pro M2\n\n  Sony WH-1000XM5  \n",
                     encoding="utf-8")
        assert cli.load_queries(str(f)) == ["Apple MacBook Pro M2",
                                            "Sony WH-1000XM5"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            cli.load_queries(str(tmp_path / "nope.txt"))

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty.txt"
        f.write_text("\n\n", encoding="utf-8")
        with pytest.raises(ValueError):
            cli.load_queries(str(f))


class TestSummaryRow:
    def test_found(self):
        row = cli.summary_row("MacBook", DETAILS)
        assert row["product_url"] == DETAILS.url
        assert row["specification_count"] == 1
        assert row["image_count"] == 0
        assert row["lowest_price_in_period"] == ""
        assert row["lowest_price_today_shop"] == "Amazon.fr"

    def test_not_found(self):
        row = cli.summary_row("Inconnu", None)
        assert row["query"] == "Inconnu"
        assert set(row) == set(cli.SUMMARY_FIELDS)
        assert all(v == "" for k, v in row.items() if k != "query")


def test_write_csv_quotes_commas(tmp_path):
    path = tmp_path / "out.csv"
    cli.write_csv(path, ["query", "lowest_price_today"],
                  [{"query": 'MacBook 13"', "lowest_price_today": "1 362,66 €"}])
    assert path.read_text(encoding="utf-8").splitlines() == [
        "query, lowest_price_today",
        '"MacBook 13""", "1 362,66 €"',
    ]


def test_save_results(tmp_path):
    output = tmp_path / "results.json"
    cli.save_results(output, [("MacBook", DETAILS), ("Inconnu", None)])

    records = json.loads(output.read_text(encoding="utf-8"))
    assert records[0]["product"]["pageTitle"] == 'Apple MacBook Pro 13" M2'
    assert records[1] == {"query": "Inconnu", "product": None}
    assert (tmp_path / "results.csv").exists()

    ws = load_workbook(tmp_path / "results.xlsx").active
    assert ws.cell(row=1, column=1).value == "Search Query"
    assert ws.cell(row=2, column=1).value == "MacBook"


def test_save_results_without_openpyxl(tmp_path, monkeypatch):
    monkeypatch.setitem(sys.modules, "openpyxl", None)
    output = tmp_path / "results.json"

    cli.save_results(output, [("MacBook", DETAILS)])

    assert output.exists()
    assert (tmp_path / "results.csv").exists()
    assert not (tmp_path / "results.xlsx").exists()


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_keeps_order_and_misses(self):
        scraper = StubScraper({"MacBook": DETAILS})
        results, blocked = await cli.run_batch(
            scraper, ["MacBook", "Inconnu"], pause_ms=(0, 0))
        assert results == [("MacBook", DETAILS), ("Inconnu", None)]
        assert blocked is False

    @pytest.mark.asyncio
    async def test_stops_on_bot_challenge(self):
        scraper = StubScraper({
            "MacBook": DETAILS,
            "Galaxy": BotChallengeError("https://ledenicheur.fr/x", "datadome"),
        })
        results, blocked = await cli.run_batch(
            scraper, ["MacBook", "Galaxy", "Sony"], pause_ms=(0, 0))
        assert results == [("MacBook", DETAILS)]
        assert blocked is True
        assert scraper.calls == ["MacBook", "Galaxy"]

    @pytest.mark.asyncio
    async def test_other_errors_do_not_stop_the_batch(self):
        scraper = StubScraper({"Galaxy": RuntimeError("boom"),
                               "Sony": DETAILS})
        results, blocked = await cli.run_batch(
            scraper, ["Galaxy", "Sony"], pause_ms=(0, 0))
        assert results == [("Galaxy", None), ("Sony", DETAILS)]
        assert blocked is False


class TestArgs:
    def test_build_config(self, monkeypatch):
        monkeypatch.delenv("LEDENICHEUR_ENV", raising=False)
        monkeypatch.delenv("LEDENICHEUR_HEADLESS", raising=False)
        monkeypatch.delenv("LEDENICHEUR_SIMILARITY_THRESHOLD", raising=False)
        args = cli.parse_args(["MacBook", "--headful", "--threshold", "0.5"])
        config = cli.build_config(args)
        assert args.names == ["MacBook"]
        assert config.headless is False
        assert config.similarity_threshold == 0.5

    def test_dev_preset(self):
        config = cli.build_config(cli.parse_args(["--dev", "MacBook"]))
        assert config.timeouts.navigation_ms == 180000

    def test_main_without_names(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert cli.main([]) == 1
