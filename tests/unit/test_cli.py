"""Tests for the command-line interface."""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from prompt_brief.cli import app


class TestExtractCommand:
    """Tests for the extract command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_transcript_file(self, tmp_path, ready_transcript):
        source = tmp_path / "conversation.txt"
        source.write_text(ready_transcript, encoding="utf-8")
        output = tmp_path / "brief.json"

        result = self.runner.invoke(app, ["extract", str(source), "--output", str(output)])

        assert result.exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["brief"]["brief"]["objective"] == "Draft a launch email campaign"
        assert payload["stageProgress"]["canGenerateFinalPrompt"] is True

    def test_messages_file(self, tmp_path, sparse_messages):
        source = tmp_path / "messages.json"
        source.write_text(json.dumps(sparse_messages), encoding="utf-8")
        output = tmp_path / "brief.json"

        result = self.runner.invoke(app, ["extract", str(source), "--messages", "-o", str(output), "--compact"])

        assert result.exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["stageProgress"]["missingRequiredStageKeys"][0] == "objective"

    def test_malformed_messages_exit_code(self, tmp_path):
        source = tmp_path / "messages.json"
        source.write_text(json.dumps([{"role": "system", "content": "x"}]), encoding="utf-8")

        result = self.runner.invoke(app, ["extract", str(source), "--messages"])

        assert result.exit_code == 2

    def test_invalid_json_exit_code(self, tmp_path):
        source = tmp_path / "messages.json"
        source.write_text("not json", encoding="utf-8")

        result = self.runner.invoke(app, ["extract", str(source), "--messages"])

        assert result.exit_code == 2

    def test_non_utf8_input_exit_code(self, tmp_path):
        source = tmp_path / "conversation.txt"
        source.write_bytes(b"user: objective: Draft a r\xe9sum\xe9 \xff\xfe")

        result = self.runner.invoke(app, ["extract", str(source)])

        assert result.exit_code == 2
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_model_flag(self, tmp_path, model_reply_factory, full_model_reply):
        source = tmp_path / "conversation.txt"
        source.write_text("user: I need something that helps new managers onboard quickly.", encoding="utf-8")
        output = tmp_path / "brief.json"
        model_call = model_reply_factory(full_model_reply)

        with patch("prompt_brief.llm.create_model_call", return_value=model_call):
            result = self.runner.invoke(app, ["extract", str(source), "--model", "-o", str(output)])

        assert result.exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["brief"]["normalizationMethod"] == "model_assisted"
        assert len(model_call.prompts) == 1


class TestInfoCommands:
    """Tests for stages and info."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_stages(self):
        result = self.runner.invoke(app, ["stages"])
        assert result.exit_code == 0

    def test_info(self):
        result = self.runner.invoke(app, ["info"])
        assert result.exit_code == 0
