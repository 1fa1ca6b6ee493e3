import logging
import re
import shutil
from pathlib import Path

from .contest import normalize_problem_id
from .models import Problem, TestCase

logger = logging.getLogger(__name__)

TASK_FILE = "task.md"
INDEX_FILE = "index.md"
TESTS_DIR = "tests"
SOLUTION_FILE = "main.py"
RUNNER_COMMAND = "atcoder-test"

_EDITORIAL_RE = re.compile(r"\s*Editorial\s*", re.IGNORECASE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def clean_title(title: str) -> str:
    return _EDITORIAL_RE.sub(" ", title).strip()


def clean_statement(statement: str) -> str:
    lines = [
        line
        for line in statement.split("\n")
        if line.strip() not in ("Editorial", "Copy")
    ]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip()


def _format_sample(n: int, tc: TestCase) -> str:
    return (
        f"### Sample {n}\n\n"
        f"**Input:**\n```\n{tc.input}\n```\n\n"
        f"**Output:**\n```\n{tc.output}\n```\n"
    )


def render_task(problem: Problem, run_target: str) -> str:
    samples = "\n".join(
        _format_sample(i, tc) for i, tc in enumerate(problem.test_cases, start=1)
    )
    return (
        f"# {problem.id} - {clean_title(problem.title)}\n\n"
        f"**Time Limit:** {problem.time_limit}\n\n"
        f"**Memory Limit:** {problem.memory_limit}\n\n"
        f"**URL:** {problem.source_url}\n\n"
        "---\n\n"
        f"{clean_statement(problem.statement)}\n\n"
        "---\n\n"
        "## Run Tests\n\n"
        f"```bash\n{RUNNER_COMMAND} {run_target}\n```\n\n"
        "## Test Cases\n\n"
        f"{samples}"
    )


def _run_target(contest_dir: Path, problem_id: str) -> str:
    # problems/abc/001 + a -> abc001/a, problems/other/dp + a -> other/dp/a
    kind, number = contest_dir.parent.name, contest_dir.name
    if number.isdigit():
        return f"{kind}{number}/{problem_id}"
    return f"{kind}/{number}/{problem_id}"


def save_problem(
    contest_dir: Path | str,
    problem: Problem,
    template_path: Path | str | None = None,
    fallback_id: str | None = None,
) -> Path:
    """Write ``task.md`` and the sample fixtures under ``contest_dir/<id>``.

    A page that yielded no id is saved under ``fallback_id`` (the id taken from
    its URL), so two such pages never share a directory.
    """
    contest_dir = Path(contest_dir)
    pid = normalize_problem_id(problem.id) or normalize_problem_id(fallback_id or "unknown")
    problem_dir = contest_dir / pid
    tests_dir = problem_dir / TESTS_DIR
    tests_dir.mkdir(parents=True, exist_ok=True)

    task_path = problem_dir / TASK_FILE
    task_path.write_text(
        render_task(problem, _run_target(contest_dir, pid)), encoding="utf-8"
    )
    for n, tc in enumerate(problem.test_cases, start=1):
        (tests_dir / f"input-{n}.txt").write_text(tc.input, encoding="utf-8")
        (tests_dir / f"output-{n}.txt").write_text(tc.output, encoding="utf-8")
    logger.debug(
        "Saved %s (%d test cases) to %s", problem.id, len(problem.test_cases), task_path
    )

    if template_path is not None:
        copy_template(Path(template_path), problem_dir / SOLUTION_FILE)
    return task_path


def copy_template(template_path: Path, target: Path) -> bool:
    if not template_path.exists() or target.exists():
        return False
    shutil.copyfile(template_path, target)
    logger.info("Created %s", target)
    return True


def render_index(problems: list[Problem], contest_name: str, contest_url: str) -> str:
    links = "\n".join(
        f"- [{p.id} - {clean_title(p.title)}]({normalize_problem_id(p.id)}/{TASK_FILE})"
        for p in problems
    )
    rows = "\n".join(
        f"| [{p.id}]({normalize_problem_id(p.id)}/{TASK_FILE}) | - | - | - | - |"
        for p in problems
    )
    return (
        f"# {contest_name.upper()}\n\n"
        f"**Contest URL:** {contest_url}\n\n"
        "## Problems\n\n"
        f"{links}\n\n"
        "## Progress\n\n"
        "| Problem | Status | Time | Memory | Notes |\n"
        "|---------|--------|------|--------|-------|\n"
        f"{rows}\n\n"
        "## Notes\n\n"
        "<!-- Add your notes here -->\n"
    )


def save_contest_index(
    contest_dir: Path | str,
    problems: list[Problem],
    contest_name: str,
    contest_url: str,
) -> Path:
    contest_dir = Path(contest_dir)
    contest_dir.mkdir(parents=True, exist_ok=True)
    index_path = contest_dir / INDEX_FILE
    index_path.write_text(
        render_index(problems, contest_name, contest_url), encoding="utf-8"
    )
    logger.info("Created contest index: %s", index_path)
    return index_path
