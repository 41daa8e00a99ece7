"""Designation rules, the district list and field-shape patterns.

The designation table is evaluated top to bottom and the first matching rule
wins, so specific titles ("Additional Director") sit above the generic ones
("Director").
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

WORD_RE = re.compile(r"[a-z]+")


class Matcher(Protocol):
    def matches(self, text: str) -> bool: ...


@dataclass(frozen=True)
class SubstringMatcher:
    needle: str

    def matches(self, text: str) -> bool:
        return self.needle.lower() in text.lower()


@dataclass(frozen=True)
class RegexMatcher:
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> RegexMatcher:
        return cls(re.compile(pattern, re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class KeywordSetMatcher:
    """Matches when any whole word of the line is one of ``keywords``."""

    keywords: frozenset[str]

    @classmethod
    def of(cls, *keywords: str) -> KeywordSetMatcher:
        return cls(frozenset(keyword.lower() for keyword in keywords))

    def matches(self, text: str) -> bool:
        return any(word in self.keywords for word in WORD_RE.findall(text.lower()))


@dataclass(frozen=True)
class DesignationRule:
    matcher: Matcher
    label: str


DESIGNATION_RULES: tuple[DesignationRule, ...] = (
    DesignationRule(
        RegexMatcher.compile(r"\b(?:addl\.?|additional)\s+director\b"), "Additional Director"
    ),
    DesignationRule(RegexMatcher.compile(r"\b(?:jt\.?|joint)\s+director\b"), "Joint Director"),
    DesignationRule(RegexMatcher.compile(r"\b(?:dy\.?|deputy)\s+director\b"), "Deputy Director"),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:asst\.?|assistant)\s+director\b"), "Assistant Director"
    ),
    DesignationRule(RegexMatcher.compile(r"\bdirector\b"), "Director"),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:addl\.?|additional)\s+commissioner\b"),
        "Additional Commissioner",
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:jt\.?|joint)\s+commissioner\b"), "Joint Commissioner"
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:dy\.?|deputy)\s+commissioner\b"), "Deputy Commissioner"
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:asst\.?|assistant)\s+commissioner\b"),
        "Assistant Commissioner",
    ),
    DesignationRule(RegexMatcher.compile(r"\bcommissioner\b"), "Commissioner"),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:sr\.?|senior)\s+system\s+analyst\b"), "Senior System Analyst"
    ),
    DesignationRule(SubstringMatcher("system analyst"), "System Analyst"),
    DesignationRule(
        RegexMatcher.compile(r"\banalyst[\s-]+cum[\s-]+programmer\b"), "Analyst cum Programmer"
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:sr\.?|senior)\s+programmer\b"), "Senior Programmer"
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:asst\.?|assistant)\s+programmer\b"), "Assistant Programmer"
    ),
    DesignationRule(SubstringMatcher("programmer"), "Programmer"),
    DesignationRule(SubstringMatcher("informatics assistant"), "Informatics Assistant"),
    DesignationRule(
        RegexMatcher.compile(r"\btechnical\s+(?:asst\.?|assistant)"), "Technical Assistant"
    ),
    DesignationRule(SubstringMatcher("executive engineer"), "Executive Engineer"),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:sr\.?|senior)\s+engineer\b"), "Senior Engineer"
    ),
    DesignationRule(SubstringMatcher("assistant engineer"), "Assistant Engineer"),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:junior\s+engineer|jen)\b"), "Junior Engineer"
    ),
    DesignationRule(
        RegexMatcher.compile(r"\b(?:accounts\s+officer|account\s+officer)\b"), "Accounts Officer"
    ),
    DesignationRule(RegexMatcher.compile(r"\baccountant\b"), "Accountant"),
    DesignationRule(RegexMatcher.compile(r"\bprivate\s+secretary\b"), "Private Secretary"),
    DesignationRule(RegexMatcher.compile(r"\bsecretary\b"), "Secretary"),
    DesignationRule(RegexMatcher.compile(r"\bsteno(?:grapher)?\b"), "Stenographer"),
    DesignationRule(KeywordSetMatcher.of("clerk", "ldc", "udc"), "Clerk"),
    DesignationRule(RegexMatcher.compile(r"\bdriver\b"), "Driver"),
    DesignationRule(KeywordSetMatcher.of("peon", "attendant", "chaprasi"), "Peon"),
)


def classify_designation(
    text: str, rules: tuple[DesignationRule, ...] = DESIGNATION_RULES
) -> str | None:
    for rule in rules:
        if rule.matcher.matches(text):
            return rule.label
    return None


RAJASTHAN_DISTRICTS: frozenset[str] = frozenset(
    {
        "AJMER",
        "ALWAR",
        "BANSWARA",
        "BARAN",
        "BARMER",
        "BHARATPUR",
        "BHILWARA",
        "BIKANER",
        "BUNDI",
        "CHITTORGARH",
        "CHURU",
        "DAUSA",
        "DHOLPUR",
        "DUNGARPUR",
        "HANUMANGARH",
        "JAIPUR",
        "JAISALMER",
        "JALORE",
        "JHALAWAR",
        "JHUNJHUNU",
        "JODHPUR",
        "KARAULI",
        "KOTA",
        "NAGAUR",
        "PALI",
        "PRATAPGARH",
        "RAJSAMAND",
        "SAWAI MADHOPUR",
        "SIKAR",
        "SIROHI",
        "SRI GANGANAGAR",
        "TONK",
        "UDAIPUR",
    }
)


def build_district_pattern(districts: frozenset[str]) -> re.Pattern[str]:
    # Longest names first; multi-word names tolerate any run of whitespace.
    # Only adjacent letters block a match, so "JAIPUR302001" still counts.
    names = sorted(districts, key=lambda name: (-len(name), name))
    alternation = "|".join(r"\s+".join(map(re.escape, name.split())) for name in names)
    return re.compile(rf"(?<![a-z])(?:{alternation})(?![a-z])", re.IGNORECASE)


DISTRICT_RE = build_district_pattern(RAJASTHAN_DISTRICTS)


def find_district(text: str, pattern: re.Pattern[str] = DISTRICT_RE) -> str | None:
    """Return the canonical name of the leftmost district mentioned in ``text``."""
    match = pattern.search(text)
    if not match:
        return None
    return " ".join(match.group(0).upper().split())


DEPARTMENT_MARKER_RE = re.compile(
    r"\b(?:office|department|deptt?|directorate|commissionerate|division|section|"
    r"cell|branch|centre|center|doit|rajcomp|secretariat|bhawan|road|district)\b",
    re.IGNORECASE,
)

PHONE_RE = re.compile(
    r"(?<!\d)(?:(?:\+91[-\s]?|91-)?[6-9]\d{9}|0\d{2,4}-?\d{6,8})(?!\d)"
)

DIGITS_ONLY_RE = re.compile(r"^\d+$")

NAME_LINE_RE = re.compile(r"^[A-Z][A-Z ]*$")

PAGE_MARKER_RE = re.compile(r"\bPage\b")

EMAIL_START_RE = re.compile(
    r"@|[\[(]\s*at\s*[\])]|gov\.in|nic\.in|rajasthan\.gov", re.IGNORECASE
)

EMAIL_CONTINUATION_RE = re.compile(r"^(?=[^a-z]*[a-z])[a-z0-9._@\-\[\]()]+$")

EMAIL_TOKEN_RE = re.compile(r"[a-z0-9_.%+-]+@[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}")

EMAIL_COMPLETE_RE = re.compile(r"@[a-z0-9-]+(?:\.[a-z0-9-]+)*\.(?:in|com|org|net)$")

EMAIL_LABEL_RE = re.compile(r"^\s*e-?mail\s*(?:id)?\s*[:\-]?\s*", re.IGNORECASE)

EMAIL_AT_RE = re.compile(r"\s*[\[(]\s*at\s*[\])]\s*", re.IGNORECASE)

EMAIL_DOT_RE = re.compile(r"\s*[\[(]\s*dot\s*[\])]\s*", re.IGNORECASE)

EMAIL_DISALLOWED_RE = re.compile(r"[^a-z0-9@.]")
