import json

from app.modules.decks import cli
from tests._helpers.fakes import ScriptedOracle, cards_json


def test_generate_prints_cards(monkeypatch, capsys):
    oracle = ScriptedOracle(f"Here you go: {cards_json(6)}")
    monkeypatch.setattr(cli, "TextOracle", lambda: oracle)

    assert cli.main(["generate", "--text", "Cells divide by mitosis.", "--count", "4"]) == 0

    cards = json.loads(capsys.readouterr().out)
    assert [c["question"] for c in cards] == ["Q1", "Q2", "Q3", "Q4"]
    assert "exactly 4" in oracle.prompts[0]


def test_generate_reads_text_file(monkeypatch, capsys, tmp_path):
    source = tmp_path / "notes.txt"
    source.write_text("The heart has four chambers.", encoding="utf-8")
    oracle = ScriptedOracle(cards_json(1))
    monkeypatch.setattr(cli, "TextOracle", lambda: oracle)

    assert cli.main(["generate", "--text-file", str(source)]) == 0
    assert "four chambers" in oracle.prompts[0]
    assert "exactly 10" in oracle.prompts[0]


def test_generate_reports_failure(monkeypatch, capsys):
    monkeypatch.setattr(cli, "TextOracle", lambda: ScriptedOracle("no json here"))

    assert cli.main(["generate", "--text", "Anything"]) == 1
    assert "Generation failed" in capsys.readouterr().out
