import pytest

from oaisdk.batch.yara import extract_rule_name, extract_yara_rule, validate_yara_rule

RULE = 'rule Suspicious_Dropper {\n    strings:\n        $a = "evil"\n    condition:\n        $a\n}'


def test_extracts_yara_fenced_block() -> None:
    content = f"Here is the rule:\n```yara\n{RULE}\n```\nLet me know."

    assert extract_yara_rule(content) == RULE


def test_yara_fence_wins_over_earlier_generic_fence() -> None:
    content = f"```python\nprint('rule x {{}}')\n```\n```yara\n{RULE}\n```"

    assert extract_yara_rule(content) == RULE


def test_extracts_generic_fence_with_rule_body() -> None:
    content = f"```\n{RULE}\n```"

    assert extract_yara_rule(content) == RULE


def test_generic_fence_without_rule_is_ignored() -> None:
    assert extract_yara_rule("```python\nprint(1)\n```") is None


def test_extracts_plain_text_rule_with_balanced_braces() -> None:
    content = 'Sure. rule Inline { strings: $a = "x" condition: $a } trailing words'

    assert extract_yara_rule(content) == 'rule Inline { strings: $a = "x" condition: $a }'


@pytest.mark.parametrize(
    "content",
    [
        "",
        "No rules here.",
        "rule Broken { condition: true",
        "```yara\nnot closed\n",
    ],
)
def test_returns_none_without_rule(content: str) -> None:
    assert extract_yara_rule(content) is None


def test_validate_yara_rule() -> None:
    assert validate_yara_rule(RULE)
    assert validate_yara_rule("rule A { condition: true }")
    assert not validate_yara_rule("rule A { strings: $a = \"x\" }")
    assert not validate_yara_rule("condition: true")


@pytest.mark.parametrize(
    ("content", "name"),
    [
        (RULE, "Suspicious_Dropper"),
        ("rule Tight{ condition: true }", "Tight"),
        ("private rule  Spaced : tag { condition: true }", "Spaced"),
        ("no rule", None),
    ],
)
def test_extract_rule_name(content: str, name: str | None) -> None:
    assert extract_rule_name(content) == name
