"""Tests for the command line entry point."""

import json

import pytest
from typer.testing import CliRunner

from aiact_wizard.cli import app


@pytest.fixture
def cli():
    return CliRunner()


@pytest.fixture
def answers_file(tmp_path):
    path = tmp_path / "answers.yaml"
    path.write_text("Q1: [1]\nQ2: [0]\nQ3: [0]\n")
    return path


class TestRunCommand:
    """Tests for `aiact-wizard run`."""

    def test_headless_text_summary(self, cli, data_dir, answers_file):
        """Should run headless and print the summary."""
        result = cli.invoke(app, ['run', '--data-dir', str(data_dir), '--answers', str(answers_file)])

        assert result.exit_code == 0, result.output
        assert 'Primary risk level: high_risk' in result.output
        assert 'You are a provider.' in result.output

    def test_headless_json(self, cli, data_dir, answers_file):
        """Should print only the export document on stdout with --json."""
        result = cli.invoke(app, ['run', '--data-dir', str(data_dir), '--answers', str(answers_file), '--json'])

        assert result.exit_code == 0, result.output
        document = json.loads(result.stdout)
        assert document['primary_risk_level'] == 'high_risk'
        assert document['applicable_articles'] == [6, 9, 16]
        assert 'What are you assessing?' not in result.stdout
        assert 'What are you assessing?' in result.stderr

    def test_interactive(self, cli, data_dir):
        """Should read answers from stdin."""
        result = cli.invoke(app, ['run', '--data-dir', str(data_dir)], input="1\n1\n")

        assert result.exit_code == 0, result.output
        assert 'Primary risk level: systemic_risk' in result.output

    def test_incomplete_script_fails(self, cli, data_dir, tmp_path):
        """Should exit 1 when the scripted answers stop early."""
        path = tmp_path / "answers.yaml"
        path.write_text("Q1: [1]\n")

        result = cli.invoke(app, ['run', '--data-dir', str(data_dir), '--answers', str(path)])

        assert result.exit_code == 1
        assert 'No scripted answer for question Q2' in result.output

    def test_data_dir_from_environment(self, cli, data_dir, answers_file, monkeypatch):
        """Should fall back to WIZARD_DATA_DIR."""
        monkeypatch.setenv('WIZARD_DATA_DIR', str(data_dir))

        result = cli.invoke(app, ['run', '--answers', str(answers_file)])

        assert result.exit_code == 0, result.output

    def test_missing_datasets(self, cli, tmp_path):
        """Should report a data directory without datasets and exit 1."""
        result = cli.invoke(app, ['run', '--data-dir', str(tmp_path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert 'Error: could not load datasets: Dataset not found' in result.output

    def test_malformed_datasets(self, cli, data_dir, tmp_path):
        """Should report datasets that fail validation and exit 1."""
        for path in data_dir.iterdir():
            (tmp_path / path.name).write_text(path.read_text())
        (tmp_path / "questions.json").write_text('{"questions": {"Q1": {"text": "Missing type"}}}')

        result = cli.invoke(app, ['run', '--data-dir', str(tmp_path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert 'Error: could not load datasets' in result.output
