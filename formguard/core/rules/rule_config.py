"""
Rule set configuration management.

Loads rule sets from YAML files in the same authoring format used in code,
so a rule set can be shipped as data to every environment.
"""

from pathlib import Path
from typing import Any

import yaml

from formguard.core.errors import MalformedRule
from formguard.core.models import Param
from formguard.core.predicates import PredicateRegistry

from .rule_set import RuleSet, build_rule_set


class RuleConfigLoader:
    """
    Loads rule sets from YAML configuration files.

    Expected YAML format:
    ```yaml
    rule_sets:
      user_credentials:
        - fields: email
          predicate: present
          message: "Email can't be empty"
        - fields: email
          predicate: email
          message: Invalid email format
        - fields: [password]
          predicate: matches
          params:
            pattern: {param: password_pattern}
          message: Invalid password format
    ```

    ``{param: name}`` marks a parameter supplied by the environment adapter.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_entries(self) -> dict[str, list[tuple]]:
        """
        Load and parse authoring entries from the YAML file.

        Returns:
            Rule set name -> ordered (fields, predicate, message, options) entries

        Raises:
            MalformedRule: If YAML is invalid or missing required keys
        """
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise MalformedRule(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config, dict) or "rule_sets" not in config:
            raise MalformedRule("Configuration file must contain 'rule_sets' section")

        rule_sets = config["rule_sets"]
        if not isinstance(rule_sets, dict):
            raise MalformedRule("'rule_sets' must map rule set names to lists of rules")

        entries: dict[str, list[tuple]] = {}
        for name, rule_defs in rule_sets.items():
            if not isinstance(rule_defs, list):
                raise MalformedRule(f"Rules for rule set '{name}' must be a list", rule_set=name)
            entries[name] = [self._parse_rule(name, rule_def, idx) for idx, rule_def in enumerate(rule_defs)]

        return entries

    def load_rule_sets(self, registry: PredicateRegistry) -> dict[str, RuleSet]:
        """
        Load every rule set in the file and build it against a registry.

        Returns:
            Rule set name -> RuleSet
        """
        return {
            name: build_rule_set(name, entries, registry)
            for name, entries in self.load_entries().items()
        }

    def load_rule_set(self, name: str, registry: PredicateRegistry) -> RuleSet:
        """
        Load a single named rule set.

        Raises:
            KeyError: If the file has no rule set with that name
        """
        entries = self.load_entries()
        if name not in entries:
            raise KeyError(f"Rule set '{name}' not found in {self.config_path}")
        return build_rule_set(name, entries[name], registry)

    def _parse_rule(self, rule_set: str, rule_def: Any, idx: int) -> tuple:
        """
        Parse a single rule definition.

        Args:
            rule_set: The rule set this rule belongs to
            rule_def: The rule definition from YAML
            idx: Index of this rule in the rule set (for error messages)

        Returns:
            (fields, predicate, message, options) entry

        Raises:
            MalformedRule: If rule definition is invalid
        """
        if not isinstance(rule_def, dict):
            raise MalformedRule(f"Rule #{idx} must be a mapping", rule_set=rule_set)

        for key in ("fields", "predicate", "message"):
            if key not in rule_def:
                raise MalformedRule(f"Rule #{idx} is missing '{key}'", rule_set=rule_set)

        options: dict[str, Any] = {}
        params = rule_def.get("params", rule_def.get("parameters"))
        if params is not None:
            if not isinstance(params, dict):
                raise MalformedRule(f"Rule #{idx} params must be a mapping", rule_set=rule_set)
            options["params"] = {key: self._parse_param(value, rule_set, idx) for key, value in params.items()}

        if "name" in rule_def:
            options["name"] = rule_def["name"]

        # Extract enabled flag (default: True)
        enabled = rule_def.get("enabled", True)
        if not isinstance(enabled, bool):
            raise MalformedRule(f"Rule #{idx} enabled must be true or false, got {enabled!r}", rule_set=rule_set)
        options["enabled"] = enabled

        return (rule_def["fields"], rule_def["predicate"], rule_def["message"], options)

    @staticmethod
    def _parse_param(value: Any, rule_set: str, idx: int) -> Any:
        if isinstance(value, dict) and set(value) == {"param"}:
            try:
                return Param(value["param"])
            except ValueError as e:
                raise MalformedRule(f"Rule #{idx} has an invalid placeholder {value!r}: {e}", rule_set=rule_set) from e
        return value
