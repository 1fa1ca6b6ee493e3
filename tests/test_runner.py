import asyncio
import logging
from pathlib import Path

import pytest

from atcoder_scraper.models import ProblemLimits, SampleResult
from atcoder_scraper.runner import (
    find_fixtures,
    format_memory,
    format_time,
    line_diff,
    load_limits,
    log_summary,
    main_async,
    normalize_problem_path,
    parse_limits,
)
from atcoder_scraper.storage import save_problem


@pytest.mark.parametrize(
    "given,expected",
    [
        ("abc1/a", "problems/abc/001/a"),
        ("abc001/A", "problems/abc/001/a"),
        ("ABC370/B", "problems/abc/370/b"),
        ("abc370/b", "problems/abc/370/b"),
        ("abc/001/a", "problems/abc/001/a"),
        ("problems/abc/001/a", "problems/abc/001/a"),
        ("other/dp/a", "problems/other/dp/a"),
        ("other/tessoku-book/A", "problems/other/tessoku-book/a"),
    ],
)
def test_normalize_problem_path(given, expected):
    assert normalize_problem_path(given) == Path(expected)


def test_normalize_absolute_path(tmp_path):
    assert normalize_problem_path(str(tmp_path)) == tmp_path


def test_parse_limits():
    text = "**Time Limit:** 2 sec\n\n**Memory Limit:** 1024 MiB\n"
    assert parse_limits(text) == ProblemLimits(time_limit_ms=2000, memory_limit_mb=1024)
    assert parse_limits("**Time Limit:** 500 ms\n**Memory Limit:** 1 GB") == (
        ProblemLimits(time_limit_ms=500, memory_limit_mb=1024)
    )
    assert parse_limits("no limits here") == ProblemLimits()


def test_load_limits_defaults_without_task_file(tmp_path):
    assert load_limits(tmp_path) == ProblemLimits(time_limit_ms=2000, memory_limit_mb=1024)


def test_find_fixtures_sorts_numerically(tmp_path):
    tests = tmp_path / "tests"
    tests.mkdir()
    for n in (1, 2, 10):
        (tests / f"input-{n}.txt").write_text(str(n))
        (tests / f"output-{n}.txt").write_text(str(n))
    (tests / "input-11.txt").write_text("orphan")

    assert [n for n, _, _ in find_fixtures(tmp_path)] == [1, 2, 10]


def test_find_fixtures_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_fixtures(tmp_path)


def _write_solution(problem_dir: Path, body: str) -> None:
    (problem_dir / "main.py").write_text(body, encoding="utf-8")


def test_runner_end_to_end(tmp_path, sample_problem):
    save_problem(tmp_path / "abc" / "001", sample_problem)
    problem_dir = tmp_path / "abc" / "001" / "a"
    _write_solution(
        problem_dir,
        "import sys\n"
        "data = sys.stdin.read().split()\n"
        "print(sum(map(int, data[1:])))\n",
    )

    rc = asyncio.run(main_async(["abc001/a", "--root", str(tmp_path)]))

    assert rc == 0


def test_runner_reports_wrong_answer(tmp_path, sample_problem):
    save_problem(tmp_path / "abc" / "001", sample_problem)
    _write_solution(tmp_path / "abc" / "001" / "a", "print(0)\n")

    assert asyncio.run(main_async(["abc/001/a", "--root", str(tmp_path)])) == 1


def test_runner_missing_solution(tmp_path):
    assert asyncio.run(main_async(["abc001/z", "--root", str(tmp_path)])) == 1


@pytest.mark.parametrize(
    "ms,expected", [(0, "0ms"), (500, "500ms"), (999.4, "999ms"), (1000, "1.00s"), (2500, "2.50s")]
)
def test_format_time(ms, expected):
    assert format_time(ms) == expected


@pytest.mark.parametrize(
    "mb,expected", [(256, "256.00MB"), (1023.5, "1023.50MB"), (1024, "1.00GB"), (2048, "2.00GB")]
)
def test_format_memory(mb, expected):
    assert format_memory(mb) == expected


def test_line_diff():
    assert line_diff("1\n2\n3", "1\n5") == [(2, "2", "5"), (3, "3", "")]
    assert line_diff("same", "same") == []


def test_runner_logs_limits_and_diff(tmp_path, sample_problem, caplog):
    save_problem(tmp_path / "abc" / "001", sample_problem)
    _write_solution(tmp_path / "abc" / "001" / "a", "print(0)\n")

    with caplog.at_level(logging.INFO):
        rc = asyncio.run(main_async(["abc001/A", "--root", str(tmp_path)]))

    assert rc == 1
    assert "Time limit: 2.00s  Memory limit: 1.00GB  Samples: 2" in caplog.text
    assert "Sample 1: FAIL" in caplog.text
    assert "Line 1:" in caplog.text
    assert '- Expected: "6"' in caplog.text
    assert '+ Actual:   "0"' in caplog.text
    assert "Failed       2" in caplog.text
    assert "Passed 0/2 samples" in caplog.text


def test_log_summary_counts_tle_and_times(caplog):
    results = [
        SampleResult(index=1, passed=True, input="1", expected="1", elapsed_ms=100),
        SampleResult(index=2, passed=True, input="2", expected="2", elapsed_ms=300),
        SampleResult(
            index=3,
            passed=False,
            input="3",
            expected="3",
            elapsed_ms=2500,
            time_limit_exceeded=True,
        ),
    ]

    with caplog.at_level(logging.INFO):
        log_summary(results)

    assert "TLE          1" in caplog.text
    assert "Success Rate 66.7%" in caplog.text
    assert "Avg Time     967ms" in caplog.text
    assert "Max Time     2.50s" in caplog.text
    assert "1 sample(s) exceeded the time limit" in caplog.text
    assert [r.levelname for r in caplog.records].count("WARNING") == 1
