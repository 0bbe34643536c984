"""
expressions.py - Template expression scanning and risk matching

Expressions are found by scanning for '${{' ... '}}' delimiters rather than
by parsing the expression grammar, and judged risky by matching them against
a list of attacker-controllable event payload fields. Both are deliberate
approximations: a stray false positive is preferred over a missed injection.
"""

import re
from typing import Iterable, List, Optional, Pattern

EXPRESSION_START = "${{"
EXPRESSION_END = "}}"

UNTRUSTED_CONTEXT_PATTERNS_VERSION = "1"

# GitHub event payload fields that may carry attacker-supplied text.
# See https://securitylab.github.com/research/github-actions-untrusted-input/
UNTRUSTED_CONTEXT_PATTERNS = (
    r"issue\.title",
    r"issue\.body",
    r"pull_request\.title",
    r"pull_request\.body",
    r"comment\.body",
    r"review\.body",
    r"review_comment\.body",
    r"pages.*\.page_name",
    r"commits.*\.message",
    r"head_commit\.message",
    r"head_commit\.author\.email",
    r"head_commit\.author\.name",
    r"commits.*\.author\.email",
    r"commits.*\.author\.name",
    r"pull_request\.head\.ref",
    r"pull_request\.head\.label",
    r"pull_request\.head\.repo\.default_branch",
)

HEAD_REF_CONTEXT = "github.head_ref"
EVENT_CONTEXT = "github.event."


class UnterminatedExpression(ValueError):
    """Raised by ``extract_expressions`` when '${{' has no closing '}}'"""

    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"unterminated expression starting at offset {offset}")


def extract_expressions(script: str) -> List[str]:
    """
    Extract the bodies of all '${{ ... }}' expressions in a script

    Scanning is left to right and non-overlapping. Each body is returned with
    surrounding whitespace stripped.

    Args:
        script: Script text

    Returns:
        Expression bodies in the order they appear

    Raises:
        UnterminatedExpression: If an opening delimiter is never closed
    """
    expressions = []
    cursor = 0

    while True:
        start = script.find(EXPRESSION_START, cursor)
        if start == -1:
            break

        body_start = start + len(EXPRESSION_START)
        end = script.find(EXPRESSION_END, body_start)
        if end == -1:
            raise UnterminatedExpression(start)

        expressions.append(script[body_start:end].strip())
        cursor = end + len(EXPRESSION_END)

    return expressions


def compile_untrusted_pattern(patterns: Iterable[str]) -> Pattern[str]:
    """Combine pattern fragments into a single search pattern"""
    return re.compile("|".join(f"(?:{p})" for p in patterns))


class ExpressionMatcher:
    """Decides whether an expression references attacker-controllable data"""

    def __init__(self, extra_patterns: Optional[Iterable[str]] = None) -> None:
        self.patterns = list(UNTRUSTED_CONTEXT_PATTERNS)
        for pattern in extra_patterns or []:
            if pattern not in self.patterns:
                self.patterns.append(pattern)
        self._compiled = compile_untrusted_pattern(self.patterns)

    def is_untrusted(self, expression: str) -> bool:
        if HEAD_REF_CONTEXT in expression:
            return True
        return EVENT_CONTEXT in expression and self._compiled.search(expression) is not None


_default_matcher = ExpressionMatcher()


def contains_untrusted_context_pattern(expression: str) -> bool:
    """Check an expression against the built-in untrusted field patterns"""
    return _default_matcher.is_untrusted(expression)
