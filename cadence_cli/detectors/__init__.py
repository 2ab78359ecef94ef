from cadence_cli.detectors.base import BaseStrategy, Strategy
from cadence_cli.detectors.errors import ErrorHandlingStrategy
from cadence_cli.detectors.naming import NamingPatternStrategy
from cadence_cli.detectors.scoring import DetectionEngine, any_triggered, default_strategies
from cadence_cli.detectors.structural import FileDispersionStrategy, StructuralConsistencyStrategy
from cadence_cli.detectors.template import TemplatePatternStrategy
from cadence_cli.detectors.text import CommitMessageStrategy
from cadence_cli.detectors.timing import BurstPatternStrategy

__all__ = [
    "BaseStrategy",
    "Strategy",
    "CommitMessageStrategy",
    "NamingPatternStrategy",
    "StructuralConsistencyStrategy",
    "BurstPatternStrategy",
    "ErrorHandlingStrategy",
    "TemplatePatternStrategy",
    "FileDispersionStrategy",
    "DetectionEngine",
    "any_triggered",
    "default_strategies",
]
