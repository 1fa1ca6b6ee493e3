from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "main.py"


class TestCase(BaseModel):
    input: str
    output: str

    model_config = ConfigDict(extra="forbid")


class Problem(BaseModel):
    id: str
    title: str
    source_url: str
    time_limit: str
    memory_limit: str
    statement: str
    test_cases: list[TestCase] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ContestReference(BaseModel):
    kind: str
    sequence_number: str
    canonical_name: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class FetchOutcome(BaseModel):
    url: str
    derived_id: str
    succeeded: bool
    problem: Problem | None = None
    failure: Exception | None = Field(default=None, exclude=True)
    error: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)


class ContestSummary(BaseModel):
    contest: ContestReference
    contest_url: str
    outcomes: list[FetchOutcome] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return len(self.outcomes)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed_ids(self) -> list[str]:
        return [o.derived_id for o in self.outcomes if not o.succeeded]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success_rate(self) -> float:
        if not self.outcomes:
            return 0.0
        return self.succeeded / self.total * 100

    @property
    def problems(self) -> list[Problem]:
        return [o.problem for o in self.outcomes if o.succeeded and o.problem]


class ProblemLimits(BaseModel):
    time_limit_ms: float = 2000.0
    memory_limit_mb: float = 1024.0

    model_config = ConfigDict(extra="forbid")


class SampleResult(BaseModel):
    index: int
    passed: bool
    input: str
    expected: str
    actual: str = ""
    error: str = ""
    elapsed_ms: float = 0.0
    time_limit_exceeded: bool = False

    model_config = ConfigDict(extra="forbid")


class ScraperConfig(BaseModel):
    concurrency: int = 3
    batch_pause_seconds: float = 0.5
    problem_max_attempts: int = 3
    problem_retry_delay_seconds: float = 1.0
    listing_max_attempts: int = 3
    listing_retry_delay_seconds: float = 2.0
    timeout_seconds: int = 30
    output_root: Path = Path("problems")
    template_path: Path | None = TEMPLATE_PATH

    model_config = ConfigDict(extra="forbid")
