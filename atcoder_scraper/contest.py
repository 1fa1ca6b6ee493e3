import re
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from .errors import InvalidContestUrl
from .models import ContestReference

CONTEST_SLUG_RE = re.compile(r"/contests/([A-Za-z0-9_-]+)(?=[/?#]|$)")
KIND_NUMBER_RE = re.compile(r"^([a-z]+)(\d+)$")


def parse_contest_url(contest_url: str) -> ContestReference:
    """Derive the contest kind and padded number from a contest URL.

    ``https://atcoder.jp/contests/abc1`` -> ``abc`` / ``001``. Slugs that are not
    ``<letters><digits>`` (``dp``, ``tessoku-book``...) map to kind ``other`` with
    the slug itself as the number.
    """
    m = CONTEST_SLUG_RE.search(contest_url)
    if not m:
        raise InvalidContestUrl(contest_url)
    name = m.group(1)
    km = KIND_NUMBER_RE.match(name)
    if not km:
        return ContestReference(kind="other", sequence_number=name, canonical_name=name)
    return ContestReference(
        kind=km.group(1),
        sequence_number=km.group(2).zfill(3),
        canonical_name=name,
    )


def tasks_url(contest_url: str) -> str:
    parts = urlsplit(contest_url)
    path = parts.path.rstrip("/")
    if not path.endswith("/tasks"):
        path = f"{path}/tasks"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def contest_dir(reference: ContestReference, root: Path | str = "problems") -> Path:
    return Path(root) / reference.kind / reference.sequence_number


def normalize_problem_id(problem_id: str) -> str:
    return problem_id.lower()


def derive_problem_id(task_url: str) -> str:
    return task_url.rstrip("/").rsplit("/", 1)[-1] or "unknown"
