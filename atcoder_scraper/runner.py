#!/usr/bin/env python3
"""Run a solution against the sample fixtures saved by ``atcoder-scrape``."""

import argparse
import asyncio
import logging
import re
import sys
import time
from pathlib import Path

from .models import ProblemLimits, SampleResult
from .storage import SOLUTION_FILE, TASK_FILE, TESTS_DIR

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "problems"

TIME_LIMIT_RE = re.compile(r"\*\*Time Limit:\*\*\s*(.+)")
MEMORY_LIMIT_RE = re.compile(r"\*\*Memory Limit:\*\*\s*(.+)")
SEC_RE = re.compile(r"(\d+(?:\.\d+)?)\s*sec", re.IGNORECASE)
MS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*ms", re.IGNORECASE)
MB_RE = re.compile(r"(\d+(?:\.\d+)?)\s*Mi?B", re.IGNORECASE)
GB_RE = re.compile(r"(\d+(?:\.\d+)?)\s*Gi?B", re.IGNORECASE)
FIXTURE_RE = re.compile(r"^(input|output)-(\d+)\.txt$")
SHORT_PATH_RE = re.compile(r"^([a-z]+)(\d+)/([a-z0-9_]+)$")
LONG_PATH_RE = re.compile(r"^[a-z]+/[a-z0-9_-]+/[a-z0-9_]+$")


def normalize_problem_path(problem_path: str, root: str = DEFAULT_ROOT) -> Path:
    """``abc1/A`` -> ``problems/abc/001/a``; ``abc/001/a`` -> ``problems/abc/001/a``."""
    p = Path(problem_path)
    if p.is_absolute() or p.parts[:1] == Path(root).parts[:1]:
        return p
    key = problem_path.lower()
    if LONG_PATH_RE.match(key):
        return Path(root) / key
    m = SHORT_PATH_RE.match(key)
    if m:
        kind, num, pid = m.groups()
        return Path(root) / kind / num.zfill(3) / pid
    return Path(root) / problem_path


def parse_limits(text: str) -> ProblemLimits:
    limits = ProblemLimits()
    tm = TIME_LIMIT_RE.search(text)
    if tm:
        value = tm.group(1)
        s = SEC_RE.search(value)
        ms = MS_RE.search(value)
        if s:
            limits.time_limit_ms = float(s.group(1)) * 1000
        elif ms:
            limits.time_limit_ms = float(ms.group(1))
    mm = MEMORY_LIMIT_RE.search(text)
    if mm:
        value = mm.group(1)
        mb = MB_RE.search(value)
        gb = GB_RE.search(value)
        if mb:
            limits.memory_limit_mb = float(mb.group(1))
        elif gb:
            limits.memory_limit_mb = float(gb.group(1)) * 1024
    return limits


def load_limits(problem_dir: Path) -> ProblemLimits:
    task = problem_dir / TASK_FILE
    if not task.exists():
        return ProblemLimits()
    return parse_limits(task.read_text(encoding="utf-8"))


def find_fixtures(problem_dir: Path) -> list[tuple[int, Path, Path]]:
    tests_dir = problem_dir / TESTS_DIR
    if not tests_dir.is_dir():
        raise FileNotFoundError(f"Tests directory not found: {tests_dir}")
    inputs: dict[int, Path] = {}
    outputs: dict[int, Path] = {}
    for f in tests_dir.iterdir():
        m = FIXTURE_RE.match(f.name)
        if not m:
            continue
        kind, n = m.group(1), int(m.group(2))
        (inputs if kind == "input" else outputs)[n] = f
    return [(n, inputs[n], outputs[n]) for n in sorted(set(inputs) & set(outputs))]


async def run_sample(
    solution: Path, index: int, input_file: Path, output_file: Path, limits: ProblemLimits
) -> SampleResult:
    data = input_file.read_text(encoding="utf-8")
    expected = output_file.read_text(encoding="utf-8").strip()
    timeout = limits.time_limit_ms / 1000

    start = time.perf_counter()
    proc = await asyncio.create_subprocess_exec(
        sys.executable,
        str(solution),
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await asyncio.wait_for(proc.communicate(data.encode()), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        return SampleResult(
            index=index,
            passed=False,
            input=data.strip(),
            expected=expected,
            error="Time limit exceeded",
            elapsed_ms=(time.perf_counter() - start) * 1000,
            time_limit_exceeded=True,
        )
    elapsed_ms = (time.perf_counter() - start) * 1000

    actual = out.decode(errors="replace").strip()
    error = ""
    if proc.returncode != 0:
        error = err.decode(errors="replace").strip() or f"exit code {proc.returncode}"
    tle = elapsed_ms > limits.time_limit_ms
    return SampleResult(
        index=index,
        passed=not error and not tle and actual == expected,
        input=data.strip(),
        expected=expected,
        actual=actual,
        error=error,
        elapsed_ms=elapsed_ms,
        time_limit_exceeded=tle,
    )


def format_time(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def format_memory(mb: float) -> str:
    if mb < 1024:
        return f"{mb:.2f}MB"
    return f"{mb / 1024:.2f}GB"


def line_diff(expected: str, actual: str) -> list[tuple[int, str, str]]:
    """Return ``(line_number, expected, actual)`` for every line that differs."""
    exp_lines = expected.split("\n")
    act_lines = actual.split("\n")
    diff = []
    for i in range(max(len(exp_lines), len(act_lines))):
        exp = exp_lines[i] if i < len(exp_lines) else ""
        act = act_lines[i] if i < len(act_lines) else ""
        if exp != act:
            diff.append((i + 1, exp, act))
    return diff


def _report(result: SampleResult, limits: ProblemLimits) -> None:
    verdict = "PASS" if result.passed else ("TLE" if result.time_limit_exceeded else "FAIL")
    logger.info(
        "Sample %d: %s (%s / %s)",
        result.index,
        verdict,
        format_time(result.elapsed_ms),
        format_time(limits.time_limit_ms),
    )
    if result.passed or result.time_limit_exceeded:
        return
    logger.info("  Input:")
    for line in result.input.split("\n"):
        logger.info("    %s", line)
    logger.info("  Expected:")
    for line in result.expected.split("\n"):
        logger.info("    %s", line)
    if result.error:
        logger.info("  Error (memory limit %s):", format_memory(limits.memory_limit_mb))
        logger.info("    %s", result.error)
        return
    logger.info("  Actual:")
    for line in result.actual.split("\n"):
        logger.info("    %s", line)
    logger.info("  Difference:")
    for n, exp, act in line_diff(result.expected, result.actual):
        logger.info("    Line %d:", n)
        logger.info('      - Expected: "%s"', exp)
        logger.info('      + Actual:   "%s"', act)


def log_summary(results: list[SampleResult]) -> None:
    total = len(results)
    passed = sum(1 for r in results if r.passed)
    tle = sum(1 for r in results if r.time_limit_exceeded)
    times = [r.elapsed_ms for r in results]
    rows = [
        ("Total", str(total)),
        ("Passed", str(passed)),
        ("Failed", str(total - passed)),
        ("TLE", str(tle)),
        ("Success Rate", f"{passed / total * 100:.1f}%"),
        ("Avg Time", format_time(sum(times) / total)),
        ("Max Time", format_time(max(times))),
    ]
    logger.info("Test Summary")
    for label, value in rows:
        logger.info("  %-12s %s", label, value)
    if tle:
        logger.warning("%d sample(s) exceeded the time limit", tle)
    logger.info("Passed %d/%d samples", passed, total)


async def run_all(problem_dir: Path, solution: Path) -> list[SampleResult]:
    limits = load_limits(problem_dir)
    fixtures = find_fixtures(problem_dir)
    logger.info(
        "Solution: %s  Time limit: %s  Memory limit: %s  Samples: %d",
        solution.name,
        format_time(limits.time_limit_ms),
        format_memory(limits.memory_limit_mb),
        len(fixtures),
    )
    results: list[SampleResult] = []
    for index, inp, outp in fixtures:
        result = await run_sample(solution, index, inp, outp, limits)
        _report(result, limits)
        results.append(result)
    return results


async def main_async(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="atcoder-test", description=__doc__)
    parser.add_argument("problem", help="e.g. abc001/a, abc/001/a or a directory")
    parser.add_argument("--solution", default=SOLUTION_FILE, help="Solution file name")
    parser.add_argument("--root", default=DEFAULT_ROOT, help="Problems root directory")
    args = parser.parse_args(argv)

    problem_dir = normalize_problem_path(args.problem, args.root).resolve()
    solution = problem_dir / args.solution
    if not solution.exists():
        logger.error("Solution file not found: %s", solution)
        return 1

    try:
        results = await run_all(problem_dir, solution)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    if not results:
        logger.error("No test cases found in %s", problem_dir / TESTS_DIR)
        return 1

    log_summary(results)
    return 0 if all(r.passed for r in results) else 1


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
