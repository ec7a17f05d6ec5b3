"""DR maturity score scale (1-5)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreDefinition:
    score: int
    label: str
    description: str


SCORE_DEFINITIONS: tuple[ScoreDefinition, ...] = (
    ScoreDefinition(
        1,
        "Critical Vulnerability",
        "No DR capability exists. Complete failure of service is inevitable in a disaster "
        "event with significant business impact.",
    ),
    ScoreDefinition(
        2,
        "Basic Capability",
        "Basic DR documentation exists but implementation is incomplete. Extended recovery "
        "time expected with potential business impact.",
    ),
    ScoreDefinition(
        3,
        "Standard Compliance",
        "DR controls meet minimum requirements with documented recovery procedures. "
        "Recovery within acceptable timeframes is possible.",
    ),
    ScoreDefinition(
        4,
        "Advanced Capability",
        "Comprehensive DR strategy with regular testing. Recovery time objectives likely "
        "to be met with minimal business impact.",
    ),
    ScoreDefinition(
        5,
        "Best Practice",
        "Fully automated DR with redundant systems, continuous testing, and improvement "
        "processes. Recovery with negligible business impact.",
    ),
)
