"""Tests for the click command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from nbtext.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestEvaluateCommand:
    """Tests for ``nbtext evaluate``."""

    def test_rich_output(self, runner: CliRunner, corpus_file: Path) -> None:
        result = runner.invoke(main, ["evaluate", "--folds", "4", str(corpus_file)])
        assert result.exit_code == 0, result.output
        assert "Holdout" in result.output
        assert "cross-validation" in result.output

    def test_save_json(self, runner: CliRunner, corpus_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "results.json"
        result = runner.invoke(
            main,
            ["evaluate", "-k", "3", "-r", "bow", "-r", "bigram",
             "--positive", "health", "--save", str(out), str(corpus_file)],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["positive_class"] == "health"
        assert list(data["representations"]) == ["bow", "bigram"]
        assert data["representations"]["bow"]["cross_validation"]["k"] == 3

    def test_config_file(self, runner: CliRunner, corpus_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"folds": 2, "representations": ["tfidf"]}), encoding="utf-8")
        out = tmp_path / "results.json"
        result = runner.invoke(
            main, ["evaluate", "--config", str(config), "-s", str(out), str(corpus_file)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["config"]["folds"] == 2
        assert list(data["representations"]) == ["tfidf"]

    def test_invalid_option_exits_with_error(self, runner: CliRunner, corpus_file: Path) -> None:
        result = runner.invoke(main, ["evaluate", "--alpha", "0", str(corpus_file)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_config_with_wrong_type_exits_with_error(
        self, runner: CliRunner, corpus_file: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"folds": "5"}), encoding="utf-8")
        result = runner.invoke(main, ["evaluate", "--config", str(config), str(corpus_file)])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "folds must be an integer" in result.output
        assert not isinstance(result.exception, TypeError)

    def test_save_to_missing_directory_exits_with_error(
        self, runner: CliRunner, corpus_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "missing" / "results.json"
        result = runner.invoke(
            main, ["evaluate", "-k", "2", "-r", "bow", "-o", "json", "-s", str(out), str(corpus_file)]
        )
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not out.exists()

    def test_empty_vocabulary_exits_with_error(self, runner: CliRunner, corpus_file: Path) -> None:
        result = runner.invoke(
            main, ["evaluate", "--min-term-freq", "1000", "-r", "bow", str(corpus_file)]
        )
        assert result.exit_code == 1
        assert "No terms survived" in result.output


class TestOtherCommands:
    """Tests for ``top-terms`` and ``tokenize``."""

    def test_top_terms(self, runner: CliRunner, corpus_file: Path) -> None:
        result = runner.invoke(main, ["top-terms", "-n", "3", str(corpus_file)])
        assert result.exit_code == 0, result.output
        assert "finance" in result.output
        assert "health" in result.output

    def test_tokenize(self, runner: CliRunner, corpus_file: Path) -> None:
        result = runner.invoke(main, ["tokenize", "--limit", "2", str(corpus_file)])
        assert result.exit_code == 0, result.output
        assert "fin-00" in result.output
        assert "hea-00" not in result.output

    def test_missing_corpus(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["evaluate", str(tmp_path / "missing.json")])
        assert result.exit_code == 2
