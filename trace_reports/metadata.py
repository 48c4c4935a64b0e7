"""Execution metadata supplied by the caller and the CI environment."""

from collections.abc import Mapping, Sequence

from trace_reports.models.intent import ExecutionMetadata

CI_PROVIDER_VARIABLES: Sequence[tuple[str, str]] = (
    ("GITHUB_ACTIONS", "github-actions"),
    ("JENKINS_URL", "jenkins"),
    ("BUILDKITE", "buildkite"),
    ("CIRCLECI", "circleci"),
    ("TRAVIS", "travis"),
)


def detect_ci_provider(environ: Mapping[str, str]) -> str | None:
    """Name the CI system the process runs under, if any."""
    if not environ.get("CI"):
        return None
    for variable, provider in CI_PROVIDER_VARIABLES:
        if environ.get(variable):
            return provider
    return "unknown"


def build_metadata(
    environ: Mapping[str, str],
    *,
    git_commit: str | None = None,
    git_diff: str | None = None,
    tags: Sequence[str] = (),
) -> ExecutionMetadata:
    """Collect metadata for a run; git values are taken as given."""
    ci_provider = detect_ci_provider(environ)
    return ExecutionMetadata(
        git_commit=git_commit,
        git_diff=git_diff,
        code_changes=[line for line in (git_diff or "").splitlines() if line],
        test_run_reason="ci-execution" if ci_provider else "local-execution",
        tags=list(tags),
        ci=ci_provider is not None,
        ci_provider=ci_provider,
    )
