"""Spam heuristic for startup submissions.

Pure scoring: each rule that fires adds its weight to the score and one
human-readable reason. ``bucket`` maps a score onto the moderation queues.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

LONG_NAME_LENGTH = 50
SHORT_DESCRIPTION_LENGTH = 10
SPAM_THRESHOLD = 3

BASE_CHECK_WEIGHT = 1
PATTERN_WEIGHT = 2


class SpamClassification(str, Enum):
    clean = "clean"
    potential_spam = "potential_spam"
    spam = "spam"


@dataclass(frozen=True)
class PatternRule:
    """A regex counted against one field; fires when matches >= threshold."""

    rule_type: str
    field: str
    pattern: re.Pattern
    threshold: int = 1
    weight: int = PATTERN_WEIGHT

    def count(self, value: Optional[str]) -> int:
        if not value:
            return 0
        return sum(1 for _ in self.pattern.finditer(value))

    def fires(self, value: Optional[str]) -> bool:
        matches = self.count(value)
        return matches > 0 and matches >= self.threshold


PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule("excessive_urls", "description", re.compile(r"(https?://|www\.)\S+"), threshold=3),
    PatternRule("repetitive_content", "description", re.compile(r"(.{15,})\1{2,}")),
    PatternRule("random_characters", "description", re.compile(r"[a-z]{15,}")),
    # Word boundaries are ASCII, as in browser regexes.
    PatternRule("repetitive_name", "name", re.compile(r"(\b\w+\b)(\s+\1){2,}", re.ASCII)),
)


@dataclass
class SpamScore:
    score: int = 0
    reasons: list[str] = field(default_factory=list)

    @property
    def classification(self) -> SpamClassification:
        return bucket(self.score)


def score_submission(name: Optional[str], description: Optional[str]) -> SpamScore:
    """Score one submission by its name and description."""
    result = SpamScore()

    if name and len(name) > LONG_NAME_LENGTH:
        result.score += BASE_CHECK_WEIGHT
        result.reasons.append("Excessively long name")

    if description and len(description) < SHORT_DESCRIPTION_LENGTH:
        result.score += BASE_CHECK_WEIGHT
        result.reasons.append("Description too short")

    fields = {"name": name, "description": description}
    for rule in PATTERN_RULES:
        if rule.fires(fields.get(rule.field)):
            result.score += rule.weight
            result.reasons.append(f"Detected {rule.rule_type} in {rule.field}")

    return result


def bucket(score: int) -> SpamClassification:
    if score >= SPAM_THRESHOLD:
        return SpamClassification.spam
    if score > 0:
        return SpamClassification.potential_spam
    return SpamClassification.clean


def _matches_search(startup, query: str) -> bool:
    query = query.lower()
    return any(
        value and query in value.lower()
        for value in (startup.name, startup.description, startup.slug)
    )


def build_spam_report(startups: Iterable, search: Optional[str] = None) -> dict:
    """Score every startup and group the flagged ones.

    Re-scores the whole set on each call. Returns
    ``{"spam": [...], "potential_spam": [...], "total": n}`` where each item
    is ``(startup, SpamScore)``, highest score first.
    """
    spam: list = []
    potential: list = []
    total = 0
    for startup in startups:
        if search and not _matches_search(startup, search):
            continue
        total += 1
        result = score_submission(startup.name, startup.description)
        classification = result.classification
        if classification is SpamClassification.spam:
            spam.append((startup, result))
        elif classification is SpamClassification.potential_spam:
            potential.append((startup, result))

    spam.sort(key=lambda item: item[1].score, reverse=True)
    potential.sort(key=lambda item: item[1].score, reverse=True)
    return {"spam": spam, "potential_spam": potential, "total": total}
