"""
Command-line interface for validating records against shared rule sets.

Usage:
    python -m formguard.cli.validate_cli check --rule-set <name> --input <file.json> [options]
    python -m formguard.cli.validate_cli conformance --rule-set <name> --records <file.json> [options]
    python -m formguard.cli.validate_cli predicates [options]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from formguard.adapters import ClientAdapter, EnvironmentAdapter, ServerAdapter, check_conformance
from formguard.config.settings import ValidationSettings, load_settings
from formguard.core.errors import FormGuardError
from formguard.core.rules import RuleConfigLoader, RuleSet, ValidationEngine
from formguard.observability.logger import get_logger, setup_logger

logger = get_logger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_WIRING_ERROR = 2


def load_json(path: str) -> Any:
    """Load a JSON document from a file path."""
    input_path = Path(path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(input_path) as f:
        return json.load(f)


def create_adapter(environment: str, settings: ValidationSettings) -> EnvironmentAdapter:
    """
    Create the adapter for an environment.

    Args:
        environment: "server" or "client"
        settings: Shared validation settings

    Returns:
        Installed EnvironmentAdapter
    """
    if environment == "client":
        adapter = ClientAdapter.from_settings(settings)
    else:
        adapter = ServerAdapter(settings)
    adapter.install()
    return adapter


def load_rule_set(args, settings: ValidationSettings, adapter: EnvironmentAdapter) -> RuleSet:
    rules_path = args.rules or settings.rules_path
    if rules_path is None:
        raise FileNotFoundError("No rule file given: pass --rules or set rules_path in settings")
    return RuleConfigLoader(rules_path).load_rule_set(args.rule_set, adapter.registry)


def check_command(args, settings: ValidationSettings) -> int:
    """
    Validate one record (or a list of records) and print the results as JSON.

    Args:
        args: Command-line arguments
        settings: Shared validation settings

    Returns:
        EXIT_VALID if every record passed, EXIT_INVALID otherwise
    """
    adapter = create_adapter(args.environment, settings)
    rule_set = load_rule_set(args, settings, adapter)
    engine = ValidationEngine(adapter.bind(rule_set))

    payload = load_json(args.input)
    records = payload if isinstance(payload, list) else [payload]
    results = engine.validate_batch(records)

    output = [result.errors for result in results]
    print(json.dumps(output if isinstance(payload, list) else output[0], indent=2))

    failed = sum(1 for result in results if not result.passed)
    logger.info(
        f"Validated {len(results)} record(s), {failed} invalid",
        extra={"rule_set": rule_set.name, "environment": adapter.environment},
    )
    return EXIT_VALID if failed == 0 else EXIT_INVALID


def conformance_command(args, settings: ValidationSettings) -> int:
    """
    Check that server and client produce identical results for every record.

    Returns:
        EXIT_VALID if the environments agree, EXIT_INVALID otherwise
    """
    adapters = [create_adapter("server", settings), create_adapter("client", settings)]
    rule_set = load_rule_set(args, settings, adapters[0])

    records = load_json(args.records)
    if not isinstance(records, list):
        records = [records]

    report = check_conformance(rule_set, adapters, records)
    print(report.model_dump_json(indent=2))
    return EXIT_VALID if report.conformant else EXIT_INVALID


def predicates_command(args, settings: ValidationSettings) -> int:
    """List every predicate known in an environment."""
    adapter = create_adapter(args.environment, settings)
    print(json.dumps(adapter.registry.describe(), indent=2))
    return EXIT_VALID


COMMANDS = {
    "check": check_command,
    "conformance": conformance_command,
    "predicates": predicates_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate records against shared declarative rule sets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a record on the server side
  python -m formguard.cli.validate_cli check --rules config/rule_sets.yaml \\
      --rule-set user_credentials --input record.json

  # Same record, client-side binding
  python -m formguard.cli.validate_cli check --rule-set user_credentials \\
      --input record.json --environment client

  # Compare server and client results over many records
  python -m formguard.cli.validate_cli conformance --rule-set user_credentials \\
      --records records.json
        """
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file"
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to .env file with FORMGUARD_* overrides"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Validate records from a JSON file")
    check_parser.add_argument("--rules", default=None, help="Path to rule set YAML file")
    check_parser.add_argument("--rule-set", required=True, help="Rule set name")
    check_parser.add_argument("--input", required=True, help="JSON file with one record or a list of records")
    check_parser.add_argument(
        "--environment",
        default="server",
        choices=["server", "client"],
        help="Environment binding to use (default: server)"
    )

    conformance_parser = subparsers.add_parser("conformance", help="Compare server and client results")
    conformance_parser.add_argument("--rules", default=None, help="Path to rule set YAML file")
    conformance_parser.add_argument("--rule-set", required=True, help="Rule set name")
    conformance_parser.add_argument("--records", required=True, help="JSON file with a list of records")

    predicates_parser = subparsers.add_parser("predicates", help="List registered predicates")
    predicates_parser.add_argument(
        "--environment",
        default="server",
        choices=["server", "client"],
        help="Environment whose registry to list (default: server)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_WIRING_ERROR

    try:
        settings = load_settings(args.config, args.env_file)
        setup_logger("formguard", level=settings.log_level, format_type=settings.log_format)
        return COMMANDS[args.command](args, settings)
    except (FormGuardError, FileNotFoundError, KeyError, ValueError) as e:
        logger.error(f"Error during {args.command}: {e}")
        return EXIT_WIRING_ERROR


if __name__ == "__main__":
    sys.exit(main())
