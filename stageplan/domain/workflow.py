"""Default procurement workflow and dependency-graph helpers.

The workflow is reference data keyed by a template version. It is seeded into
the database once per version and passed explicitly into the scheduling
functions; nothing here is mutated at runtime.
"""

from collections.abc import Iterable

from stageplan.domain.stages import (
    PNC_STAGE_CODE,
    StageDefinition,
    StageDependency,
    normalize_code,
)

# (code, name, sequence, optional, parallel_group)
DEFAULT_STAGES: tuple[tuple[str, str, int, bool, str | None], ...] = (
    ("FS", "Feasibility Study", 10, False, None),
    ("IPA", "In-Principle Approval", 20, False, None),
    ("SOW", "Sanction of Work", 30, False, None),
    ("AON", "Acceptance of Necessity", 40, False, None),
    ("BID", "Bid Upload", 50, False, None),
    ("TEC", "Technical Evaluation", 60, False, None),
    ("BM", "Benchmarking", 65, False, "PRE_COB"),
    ("COB", "Commercial Opening Board", 70, False, None),
    (PNC_STAGE_CODE, "Price Negotiation Committee", 80, True, None),
    ("EAS", "Expenditure Angle Sanction", 90, False, None),
    ("SO", "Supply Order", 100, False, None),
    ("DEVP", "Development", 110, False, None),
    ("ATP", "Acceptance Testing", 120, False, None),
    ("PAYMENT", "Payment", 130, False, None),
    ("TOT", "Transfer of Technology", 140, False, None),
)

# (from_stage_code, depends_on_stage_code)
DEFAULT_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("IPA", "FS"),
    ("SOW", "IPA"),
    ("AON", "SOW"),
    ("BID", "AON"),
    ("TEC", "BID"),
    ("BM", "BID"),
    ("COB", "TEC"),
    ("COB", "BM"),
    (PNC_STAGE_CODE, "COB"),
    ("EAS", "COB"),
    ("EAS", PNC_STAGE_CODE),
    ("SO", "EAS"),
    ("DEVP", "SO"),
    ("ATP", "DEVP"),
    ("PAYMENT", "ATP"),
    ("TOT", "ATP"),
)


def default_stage_definitions(version: str) -> list[StageDefinition]:
    """Return the default workflow's stages for a template version."""
    return [
        StageDefinition(
            code=code,
            name=name,
            sequence=sequence,
            version=version,
            optional=optional,
            parallel_group=parallel_group,
        )
        for code, name, sequence, optional, parallel_group in DEFAULT_STAGES
    ]


def default_stage_dependencies(version: str) -> list[StageDependency]:
    """Return the default workflow's dependency edges for a template version."""
    return [
        StageDependency(from_stage_code=from_code, depends_on_stage_code=depends_on, version=version)
        for from_code, depends_on in DEFAULT_DEPENDENCIES
    ]


def build_predecessor_map(
    dependencies: Iterable[StageDependency],
    included_codes: set[str] | None = None,
) -> dict[str, list[str]]:
    """Build an adjacency map: normalized stage code -> normalized predecessor codes.

    When included_codes is given, edges with either endpoint outside it are
    dropped. Duplicate edges collapse; predecessor order follows the input.
    """
    predecessors: dict[str, list[str]] = {}
    for dep in dependencies:
        from_code = normalize_code(dep.from_stage_code)
        depends_on = normalize_code(dep.depends_on_stage_code)
        if included_codes is not None and (from_code not in included_codes or depends_on not in included_codes):
            continue
        edges = predecessors.setdefault(from_code, [])
        if depends_on not in edges:
            edges.append(depends_on)
    return predecessors


def find_sequence_violations(
    templates: Iterable[StageDefinition],
    dependencies: Iterable[StageDependency],
) -> list[str]:
    """List dependency edges that ascending-sequence traversal cannot honour.

    The schedule engine processes stages by ascending sequence and assumes
    every predecessor has a strictly lower sequence than its dependent. This
    reports edges that break that assumption (including edges naming unknown
    stages). It never reorders anything.
    """
    sequence_by_code = {normalize_code(t.code): t.sequence for t in templates}
    violations: list[str] = []
    for dep in dependencies:
        from_code = normalize_code(dep.from_stage_code)
        depends_on = normalize_code(dep.depends_on_stage_code)
        if from_code not in sequence_by_code:
            violations.append(f"Stage '{from_code}' has dependencies but no template")
            continue
        if depends_on not in sequence_by_code:
            violations.append(f"Stage '{from_code}' depends on unknown stage '{depends_on}'")
            continue
        if sequence_by_code[depends_on] >= sequence_by_code[from_code]:
            violations.append(
                f"Stage '{from_code}' (sequence {sequence_by_code[from_code]}) depends on "
                f"'{depends_on}' (sequence {sequence_by_code[depends_on]})"
            )
    return violations
