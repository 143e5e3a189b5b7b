# src/htmlint/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional, Type

from htmlint.model import FrameworkConfig
from .core import Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Central registry for lint rules.

    The rule catalog is discovered once per process from the modules of the
    'htmlint.rules' package: every module may expose a `RULES` list of Rule
    subclasses. Instances are created per registry so framework configuration
    never leaks between runs.
    """

    _rule_classes: List[Type[Rule]] = []
    _loaded: bool = False

    def __init__(self, frameworks: Optional[FrameworkConfig] = None):
        self.discover()
        self.frameworks = frameworks or FrameworkConfig()
        self._rules: Dict[str, Rule] = {}

        for rule_cls in self._rule_classes:
            rule = rule_cls()
            if rule.configurable:
                rule.configure(self.frameworks)
            self._rules[rule.name] = rule

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all rule classes found in the 'htmlint.rules' package.

        Modules are visited in alphabetical order and rules keep their declaration
        order inside a module, so the catalog order is deterministic.
        """
        if cls._loaded:
            return

        try:
            import htmlint.rules as rules_pkg
        except ImportError as e:
            logger.error(f"Could not find rules package: {e}")
            return

        seen: Dict[str, Type[Rule]] = {}
        for _, name, _ in sorted(pkgutil.iter_modules(rules_pkg.__path__), key=lambda m: m[1]):
            full_name = f"htmlint.rules.{name}"
            module = importlib.import_module(full_name)
            for rule_cls in getattr(module, "RULES", []):
                if not (isinstance(rule_cls, type) and issubclass(rule_cls, Rule)):
                    logger.warning(f"Ignoring non-rule entry {rule_cls!r} in {full_name}")
                    continue
                if not rule_cls.name:
                    raise ValueError(f"{rule_cls.__name__} in {full_name} has no rule name")
                if rule_cls.name in seen:
                    raise ValueError(f"Duplicate rule name '{rule_cls.name}' in {full_name}")
                seen[rule_cls.name] = rule_cls
                cls._rule_classes.append(rule_cls)
            logger.debug(f"Rule module loaded: {name}")

        cls._loaded = True

    @classmethod
    def rule_classes(cls) -> List[Type[Rule]]:
        cls.discover()
        return list(cls._rule_classes)

    def all(self) -> List[Rule]:
        """Returns every rule instance in registration order."""
        return list(self._rules.values())

    def get(self, name: str) -> Optional[Rule]:
        return self._rules.get(name)

    def names(self) -> List[str]:
        return list(self._rules.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)
