"""
Integration tests for the validation CLI.
"""

import json

import pytest

from formguard.cli.validate_cli import EXIT_INVALID, EXIT_VALID, EXIT_WIRING_ERROR, main

pytestmark = pytest.mark.integration


def write_json(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(json.dumps(payload))
    return str(path)


class TestCheckCommand:
    """Tests for the check command"""

    def test_invalid_record(self, tmp_path, rule_sets_path, capsys):
        input_path = write_json(tmp_path, "record.json", {"email": "bad", "password": ""})

        code = main([
            "check", "--rules", str(rule_sets_path),
            "--rule-set", "user_credentials", "--input", input_path,
        ])

        assert code == EXIT_INVALID
        assert json.loads(capsys.readouterr().out) == {
            "email": ["Invalid email format"],
            "password": ["Password can't be empty", "Invalid password format"],
        }

    def test_valid_record_client_environment(self, tmp_path, rule_sets_path, capsys):
        input_path = write_json(tmp_path, "record.json", {"email": "x@y.com", "password": "ab12"})

        code = main([
            "check", "--rules", str(rule_sets_path),
            "--rule-set", "user_credentials", "--input", input_path,
            "--environment", "client",
        ])

        assert code == EXIT_VALID
        assert json.loads(capsys.readouterr().out) == {}

    def test_batch_input(self, tmp_path, rule_sets_path, capsys):
        input_path = write_json(tmp_path, "records.json", [
            {"email": "x@y.com", "password": "ab12"},
            {"email": "x@y.com", "password": "abcd"},
        ])

        code = main([
            "check", "--rules", str(rule_sets_path),
            "--rule-set", "user_credentials", "--input", input_path,
        ])

        assert code == EXIT_INVALID
        assert json.loads(capsys.readouterr().out) == [{}, {"password": ["Invalid password format"]}]

    def test_unknown_rule_set(self, tmp_path, rule_sets_path):
        input_path = write_json(tmp_path, "record.json", {})

        code = main([
            "check", "--rules", str(rule_sets_path),
            "--rule-set", "missing", "--input", input_path,
        ])

        assert code == EXIT_WIRING_ERROR

    def test_missing_input_file(self, rule_sets_path):
        code = main([
            "check", "--rules", str(rule_sets_path),
            "--rule-set", "user_credentials", "--input", "/nonexistent/record.json",
        ])
        assert code == EXIT_WIRING_ERROR

    def test_rules_path_from_settings(self, tmp_path, rule_sets_path, capsys):
        settings_path = tmp_path / "settings.yaml"
        settings_path.write_text(f"settings:\n  rules_path: {rule_sets_path}\n  log_format: text\n")
        input_path = write_json(tmp_path, "record.json", {"email": "x@y.com", "password": "ab12"})

        code = main([
            "--config", str(settings_path),
            "check", "--rule-set", "user_credentials", "--input", input_path,
        ])

        assert code == EXIT_VALID

    def test_no_rules_configured(self, tmp_path):
        input_path = write_json(tmp_path, "record.json", {})
        code = main(["check", "--rule-set", "user_credentials", "--input", input_path])
        assert code == EXIT_WIRING_ERROR


class TestConformanceCommand:
    """Tests for the conformance command"""

    def test_environments_agree(self, tmp_path, rule_sets_path, capsys):
        records_path = write_json(tmp_path, "records.json", [
            {"email": "bad", "password": ""},
            {"email": "x@y.com", "password": "ab12"},
        ])

        code = main([
            "conformance", "--rules", str(rule_sets_path),
            "--rule-set", "user_credentials", "--records", records_path,
        ])

        assert code == EXIT_VALID
        report = json.loads(capsys.readouterr().out)
        assert report["divergences"] == []
        assert report["records_checked"] == 2


class TestPredicatesCommand:
    """Tests for the predicates command"""

    def test_lists_registry(self, capsys):
        code = main(["predicates"])

        assert code == EXIT_VALID
        rows = {row["name"]: row for row in json.loads(capsys.readouterr().out)}
        assert rows["present"]["scope"] == "portable"
        assert rows["matches"]["kind"] == "factory"
        assert rows["email_domain_resolves"]["available"] is False


def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_WIRING_ERROR
    assert "usage" in capsys.readouterr().out.lower()
