"""Custom exceptions for bytecode-enforcer."""


class EnforcerError(Exception):
    """Base exception for all enforcer errors."""


class ArtifactResolutionError(EnforcerError):
    """Raised by a resolver when a coordinate cannot be resolved at all."""


class DependencyResolutionError(EnforcerError):
    """Raised when one or more dependencies of the project could not be resolved."""


class ArchiveReadError(EnforcerError):
    """Raised when a dependency archive cannot be opened or read."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Unable to read archive {path}: {cause}")


class GraphBuildError(EnforcerError):
    """Raised when the dependency graph of a project cannot be built."""

    def __init__(self, project_name: str | None, detail: str | None = None):
        self.project_name = project_name
        msg = f"Unable to build dependency graph on project {project_name}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ProjectModelError(EnforcerError):
    """Raised when the project's pom.xml is missing or malformed."""


class RuleViolationError(EnforcerError):
    """Raised when dependencies exceed the supported bytecode level.

    ``report`` carries the full multi-line report.
    """

    def __init__(self, report: str):
        self.report = report
        super().__init__(report)
