"""Static disaster-recovery lookup tables."""

from src.catalog.dimensions import (
    DIMENSIONS,
    Dimension,
    Parameter,
    ParameterType,
    dimension_for_parameter,
    get_dimension,
    get_parameter,
    scorable_parameters,
)
from src.catalog.scores import SCORE_DEFINITIONS, ScoreDefinition

__all__ = [
    "DIMENSIONS",
    "Dimension",
    "Parameter",
    "ParameterType",
    "SCORE_DEFINITIONS",
    "ScoreDefinition",
    "dimension_for_parameter",
    "get_dimension",
    "get_parameter",
    "scorable_parameters",
]
