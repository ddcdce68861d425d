"""Tests for the command line entry point."""

from __future__ import annotations

import json
import logging

import pytest

import main
from models.article import ArticleContent, ArticleSummary
from models.product import DiscoveryResult, ProductRecord


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setenv("GEMINI_API_KEY", "g")
    monkeypatch.setenv("SERPER_API_KEY", "s")
    root = logging.getLogger()
    saved = root.handlers[:]
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    for handler in saved:
        root.addHandler(handler)


def test_status_never_prints_keys(capsys):
    assert main.main(["status"]) == 0
    out = capsys.readouterr().out
    data = json.loads(out)
    assert data["config"]["gemini_api_key"] == "set"
    assert data["valid"] is True
    assert '"g"' not in out


def test_commands_need_keys(monkeypatch, capsys):
    monkeypatch.delenv("SERPER_API_KEY")
    assert main.main(["discover"]) == 1
    assert "SERPER_API_KEY" in capsys.readouterr().err


def test_verify_rejects_non_url_without_keys(monkeypatch, capsys):
    monkeypatch.delenv("GEMINI_API_KEY")
    assert main.main(["verify", "--url", "not-a-url"]) == 1
    assert json.loads(capsys.readouterr().out) == {"url": "not-a-url", "ok": False}


def test_discover_prints_json(monkeypatch, capsys):
    class _Pipeline:
        def __init__(self, config):
            self.config = config

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        async def discover(self):
            record = ProductRecord(name="Jute bag", image="https://i", link="https://l")
            return DiscoveryResult.from_products([record])

    monkeypatch.setattr("pipeline.Pipeline", _Pipeline)
    assert main.main(["discover", "--count", "2"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["editorsPicks"][0]["name"] == "Jute bag"


def test_failure_prints_generic_message(monkeypatch, capsys):
    class _Pipeline:
        def __init__(self, config):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        async def ask_question(self, question):
            raise RuntimeError("secret internals")

    monkeypatch.setattr("pipeline.Pipeline", _Pipeline)
    assert main.main(["ask", "Why compost?"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: ask failed. See log for details." in captured.err


class _LearnPipeline:
    def __init__(self, config):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def get_article_list(self):
        return [ArticleSummary(id="kitchen-swaps", title="Kitchen Swaps")]

    async def get_article_content(self, article_id):
        return ArticleContent(content=f"Body of {article_id}", takeaways=["One"], image="https://i")


def test_learn_list_prints_catalogue(monkeypatch, capsys):
    monkeypatch.setattr("pipeline.Pipeline", _LearnPipeline)
    assert main.main(["learn", "--list"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [a["id"] for a in data["articles"]] == ["kitchen-swaps"]


def test_learn_article_prints_content(monkeypatch, capsys):
    monkeypatch.setattr("pipeline.Pipeline", _LearnPipeline)
    assert main.main(["learn", "--article", "kitchen-swaps"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {"content": "Body of kitchen-swaps", "takeaways": ["One"], "image": "https://i"}
