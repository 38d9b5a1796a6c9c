"""Extract YARA rules from model responses.

Responses usually wrap the rule in a fenced ```` ```yara ```` block, sometimes
in an untagged fence, and occasionally inline. Strategies are tried in that
order and the first hit wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable

_FENCE = "```"
_RULE_NAME = re.compile(r"rule\s+([^\s{]+)")


def extract_yara_rule(content: str) -> str | None:
    """Return the first YARA rule found in ``content``, trimmed, or ``None``."""

    strategies: tuple[Callable[[str], str | None], ...] = (
        _from_yara_block,
        _from_generic_block,
        _from_plain_text,
    )
    for strategy in strategies:
        rule = strategy(content)
        if rule is not None:
            return rule
    return None


def validate_yara_rule(rule_content: str) -> bool:
    """Shallow structural check: rule keyword, braces and a condition."""

    return _looks_like_rule(rule_content) and "condition" in rule_content


def extract_rule_name(rule_content: str) -> str | None:
    match = _RULE_NAME.search(rule_content)
    if match is None:
        return None
    return match.group(1)


def _from_yara_block(content: str) -> str | None:
    start = content.find(f"{_FENCE}yara")
    if start < 0:
        return None
    return _fenced_body(content, start + len(_FENCE) + len("yara"))


def _from_generic_block(content: str) -> str | None:
    start = content.find(_FENCE)
    if start < 0:
        return None
    body = _fenced_body(content, start + len(_FENCE))
    if body is None or not _looks_like_rule(body):
        return None
    return body


def _from_plain_text(content: str) -> str | None:
    if not _looks_like_rule(content):
        return None
    return _balanced_braces(content[content.find("rule ") :])


def _fenced_body(content: str, after_fence: int) -> str | None:
    newline = content.find("\n", after_fence)
    body_start = after_fence if newline < 0 else newline + 1
    end = content.find(_FENCE, body_start)
    if end < 0:
        return None
    return content[body_start:end].strip()


def _looks_like_rule(content: str) -> bool:
    return "rule " in content and "{" in content and "}" in content


def _balanced_braces(content: str) -> str | None:
    depth = 0
    for index, char in enumerate(content):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[: index + 1].strip()
    return None


__all__ = ["extract_rule_name", "extract_yara_rule", "validate_yara_rule"]
