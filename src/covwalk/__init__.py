"""covwalk - model-based test generation by coverage-guided path search.

Describe the system under test as a Model of states and transitions, say
what should be covered, and let a Coverer pick the paths that cover the
most:

    from covwalk import Coverer, GenerationSession, Model, on_action, when

    model = Model()
    model.register_generator(lambda s: when(not s.playing,
        on_action("play").do(lambda s: PlayerState(True, s.song))))

    coverer = Coverer()
    coverer.cover_state_actions()
    result = GenerationSession(model, coverer, PlayerState(False, 1)).run()
"""

from covwalk.agent import Advance, Executor, GenerationSession
from covwalk.agent.coverer import BestPathRandom, CoverageStats, Coverer
from covwalk.config import CovwalkConfig, configure_logging, load_config
from covwalk.core.action import Action
from covwalk.core.coverage import SEPARATOR, CoverageFunction, CoverageKind
from covwalk.core.model import Model, Walkable
from covwalk.core.result import GenerationResult
from covwalk.core.state import State, render
from covwalk.core.step import Path, Step, check_path, is_chained, new_path
from covwalk.core.transition import StateChange, Transition, TransitionGen
from covwalk.core.walker import StepFilter, Walker
from covwalk.dsl import on_action, when
from covwalk.errors import (
    ConfigValidationError,
    CoverageConfigError,
    CovwalkError,
    ErrorCode,
    ErrorContext,
    PathChainError,
)
from covwalk.reporters.console import ConsoleReporter

__version__ = "0.1.0"

__all__ = [
    # Core
    "State",
    "render",
    "Action",
    "Transition",
    "StateChange",
    "TransitionGen",
    "Step",
    "Path",
    "new_path",
    "check_path",
    "is_chained",
    "Model",
    "Walkable",
    "Walker",
    "StepFilter",
    "GenerationResult",
    # Coverage
    "SEPARATOR",
    "CoverageFunction",
    "CoverageKind",
    "Coverer",
    "CoverageStats",
    "BestPathRandom",
    # Agent
    "Advance",
    "Executor",
    "GenerationSession",
    # DSL
    "when",
    "on_action",
    # Config
    "CovwalkConfig",
    "load_config",
    "configure_logging",
    # Errors
    "CovwalkError",
    "ErrorCode",
    "ErrorContext",
    "ConfigValidationError",
    "CoverageConfigError",
    "PathChainError",
    # Reporters
    "ConsoleReporter",
]
