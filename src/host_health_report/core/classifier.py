"""Process-name classifier."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..errors import RuleTableError
from .models import Classification, ClassificationRule, LogEntry
from .rules import FALLBACK_RULE, default_rules


@dataclass(frozen=True, slots=True)
class Classifier:
    """Map a process name to a severity and remediation hint (first match wins)."""

    rules: Sequence[ClassificationRule] = field(default_factory=default_rules)
    fallback: ClassificationRule = FALLBACK_RULE

    def __post_init__(self) -> None:
        rules = tuple(self.rules)
        names = [r.name for r in rules]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise RuleTableError(f"Duplicate rule names: {', '.join(dupes)}")
        object.__setattr__(self, "rules", rules)

    def classify(self, process: str) -> Classification:
        """Classify a process name."""
        for rule in self.rules:
            if rule.matches(process):
                return Classification(rule.severity, rule.explanation, rule.name)
        fb = self.fallback
        return Classification(fb.severity, fb.explanation, fb.name)

    def classify_entry(self, entry: LogEntry) -> Classification:
        return self.classify(entry.process)
