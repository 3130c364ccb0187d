"""
Tests for the drapekit command-line interface.
"""

import io
import json

from drapekit.cli.main import main


class TestExtractCommand:

    def test_json_output(self, well_formed_text, capsys):
        code = main(["extract", well_formed_text, "--log-level", "silent"])

        out = capsys.readouterr().out
        body = json.loads(out)
        assert code == 0
        assert body["designName"] == "V领垂坠连衣裙"
        assert body["meta"]["decodeTier"] == 0

    def test_summary_output(self, truncated_text, capsys):
        code = main(["extract", truncated_text, "--format", "summary", "--log-level", "silent"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Status: partial" in out
        assert "Decode tier: 5 (salvaged)" in out
        assert "SALVAGED_CONTENT" in out

    def test_result_output(self, well_formed_text, capsys):
        main(["extract", well_formed_text, "--format", "result", "--log-level", "silent"])

        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "success"
        assert result["decode_tier"] == 0
        assert result["document"]["designName"] == "V领垂坠连衣裙"

    def test_failure_exit_code(self, refusal_text, capsys):
        code = main(["extract", refusal_text, "--log-level", "silent"])

        body = json.loads(capsys.readouterr().out)
        assert code == 1
        assert body["code"] == "NO_JSON_OBJECT_FOUND"
        assert body["retry"] is True

    def test_reads_file_and_writes_output(self, well_formed_text, tmp_path):
        src = tmp_path / "model_output.txt"
        src.write_text(f"```json\n{well_formed_text}\n```", encoding="utf-8")
        dest = tmp_path / "tutorial.json"

        code = main(["extract", str(src), "-o", str(dest), "--log-level", "silent"])

        assert code == 0
        assert json.loads(dest.read_text(encoding="utf-8"))["designName"] == "V领垂坠连衣裙"

    def test_reads_stdin(self, well_formed_text, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(well_formed_text))

        code = main(["extract", "-", "--log-level", "silent"])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["designName"] == "V领垂坠连衣裙"

    def test_prefill(self, capsys):
        code = main([
            "extract", '"steps": [{"title": "a"}]}',
            "--prefill", "{",
            "--log-level", "silent",
        ])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["steps"][0]["title"] == "a"

    def test_strict_pipeline(self, truncated_text, capsys):
        code = main(["extract", truncated_text, "--pipeline", "strict", "--log-level", "silent"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["code"] == "UNRECOVERABLE_CONTENT"

    def test_unknown_domain(self, well_formed_text, capsys):
        code = main(["extract", well_formed_text, "--domain", "nope", "--log-level", "silent"])

        assert code == 1
        assert "nope" in capsys.readouterr().err


class TestDomainsCommand:

    def test_lists_bundled(self, capsys):
        assert main(["domains"]) == 0
        assert "draping" in capsys.readouterr().out.split()


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "drapekit" in capsys.readouterr().out
