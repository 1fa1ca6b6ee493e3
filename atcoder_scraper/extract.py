"""Turn an AtCoder task page into a :class:`~atcoder_scraper.models.Problem`.

Extraction is best-effort: a page missing the expected structure still yields
a ``Problem`` (possibly with empty fields). Empty fields are logged at
debug level and can be queried with :func:`degenerate_fields`.
"""

import html
import logging
import re
from collections.abc import Callable

from .document import (
    Node,
    find_all,
    find_first,
    has_class,
    iter_descendants,
    iter_headed_runs,
    matches,
)
from .models import Problem, TestCase

logger = logging.getLogger(__name__)

INPUT_LABELS = ("入力例", "Sample Input")
OUTPUT_LABELS = ("出力例", "Sample Output")
SAMPLE_LABELS = INPUT_LABELS + OUTPUT_LABELS

CONTROL_CLASSES = ("btn", "btn-copy", "io-style", "sample-footer", "editorial")
PRESERVED_TAGS = ("table", "center", "pre")

SECTION_SEPARATOR = "\n\n\n\n"
TITLE_SEPARATOR = " - "

EDITORIAL_RE = re.compile(r"^Editorial\s*$", re.IGNORECASE)
VAR_RE = re.compile(r"<var>(.*?)</var>", re.DOTALL)
TIME_LIMIT_RE = re.compile(r"Time Limit:\s*([^/]*)")
MEMORY_LIMIT_RE = re.compile(r"Memory Limit:\s*([^/]*)")

Exclusion = tuple[str, Callable[[Node], bool]]

# Evaluated in order; the first match drops the sibling from its section.
SIBLING_EXCLUSIONS: list[Exclusion] = [
    ("control", lambda n: has_class(n, *CONTROL_CLASSES)),
    ("nested-button", lambda n: any(has_class(d, "btn") for d in iter_descendants(n))),
    ("blank", lambda n: not n.text().strip()),
    ("copy-label", lambda n: n.text().strip() == "Copy"),
    ("editorial-label", lambda n: bool(EDITORIAL_RE.match(n.text().strip()))),
]

HEADING_EXCLUSIONS: list[Exclusion] = [
    ("sample-label", lambda h: _has_label(h.text(), SAMPLE_LABELS)),
]


def _has_label(text: str, labels: tuple[str, ...]) -> bool:
    return any(label in text for label in labels)


def excluded_by(node: Node, rules: list[Exclusion]) -> str | None:
    for name, pred in rules:
        if pred(node):
            return name
    return None


def convert_var_to_math(markup: str) -> str:
    return VAR_RE.sub(lambda m: f"${html.unescape(m.group(1))}$", markup)


def _plain_text(node: Node) -> str:
    if node.name == "var":
        return f"${node.text()}$"
    return "".join(c if isinstance(c, str) else _plain_text(c) for c in node.contents())


def render_block(node: Node) -> str:
    if node.name in PRESERVED_TAGS or find_first(node, matches("table")) is not None:
        return convert_var_to_math(node.inner_html())
    return _plain_text(node).strip()


def text_from_pre(pre: Node) -> str:
    return pre.text().replace("\r", "").replace("\xa0", " ").strip()


def _visible_text(node: Node) -> str:
    if has_class(node, *CONTROL_CLASSES):
        return ""
    return "".join(c if isinstance(c, str) else _visible_text(c) for c in node.contents())


def extract_header(document: Node) -> tuple[str, str]:
    span = find_first(document, matches("span", "h2"))
    if span is None:
        return "", ""
    text = _visible_text(span).strip()
    problem_id, _, title = text.partition(TITLE_SEPARATOR)
    return problem_id.strip(), title.strip()


def _extract_limit(document: Node, label: str, pattern: re.Pattern[str]) -> str:
    p = find_first(document, lambda n: n.name == "p" and label in n.text())
    if p is None:
        return ""
    m = pattern.search(p.text())
    return m.group(1).strip() if m else ""


def extract_limits(document: Node) -> tuple[str, str]:
    return (
        _extract_limit(document, "Time Limit:", TIME_LIMIT_RE),
        _extract_limit(document, "Memory Limit:", MEMORY_LIMIT_RE),
    )


def select_variant(container: Node) -> Node:
    """Prefer the Japanese statement, then English, then the whole container."""
    return (
        find_first(container, matches(cls="lang-ja"))
        or find_first(container, matches(cls="lang-en"))
        or container
    )


def extract_statement(variant: Node) -> str:
    sections: list[str] = []
    for heading, siblings in iter_headed_runs(variant, "h3"):
        if excluded_by(heading, HEADING_EXCLUSIONS):
            continue
        blocks = [
            render_block(sib)
            for sib in siblings
            if excluded_by(sib, SIBLING_EXCLUSIONS) is None
        ]
        content = SECTION_SEPARATOR.join(blocks).strip()
        if content:
            sections.append(f"## {heading.text().strip()}\n\n{content}")
    return SECTION_SEPARATOR.join(sections)


def pair_samples(inputs: list[str], outputs: list[str]) -> list[TestCase]:
    return [TestCase(input=i, output=o) for i, o in zip(inputs, outputs)]


def extract_test_cases(variant: Node) -> list[TestCase]:
    inputs: list[str] = []
    outputs: list[str] = []
    for part in find_all(variant, matches(cls="part")):
        label = " ".join(h.text().strip() for h in find_all(part, matches("h3")))
        pre = find_first(part, matches("pre"))
        if pre is None:
            continue
        if _has_label(label, INPUT_LABELS):
            inputs.append(text_from_pre(pre))
        if _has_label(label, OUTPUT_LABELS):
            outputs.append(text_from_pre(pre))
    return pair_samples(inputs, outputs)


def degenerate_fields(problem: Problem) -> list[str]:
    fields = ["id", "title", "time_limit", "memory_limit", "statement"]
    out = [f for f in fields if not getattr(problem, f)]
    if not problem.test_cases:
        out.append("test_cases")
    return out


def extract_problem(document: Node, source_url: str) -> Problem:
    problem_id, title = extract_header(document)
    time_limit, memory_limit = extract_limits(document)

    container = find_first(document, matches(element_id="task-statement"))
    if container is None:
        statement, test_cases = "", []
    else:
        variant = select_variant(container)
        statement = extract_statement(variant)
        test_cases = extract_test_cases(variant)

    problem = Problem(
        id=problem_id,
        title=title,
        source_url=source_url,
        time_limit=time_limit,
        memory_limit=memory_limit,
        statement=statement,
        test_cases=test_cases,
    )
    missing = degenerate_fields(problem)
    if missing:
        logger.debug(
            "Incomplete extraction for %s: missing %s",
            source_url,
            ", ".join(missing),
            extra={"source_url": source_url, "missing_fields": missing},
        )
    return problem
