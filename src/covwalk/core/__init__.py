"""Core data objects for covwalk.

This module contains the fundamental data structures:
- State: the rendering capability user states provide
- Action, Transition: what can be tested and how it changes the state
- Step, Path: realized transitions and chains of them
- Model, Walker: transition registry and path enumeration
- GenerationResult: output of a generation session
"""

from covwalk.core.action import Action
from covwalk.core.model import Model, Walkable
from covwalk.core.result import GenerationResult
from covwalk.core.state import State, render
from covwalk.core.step import Path, Step, check_path, new_path
from covwalk.core.transition import StateChange, Transition, TransitionGen
from covwalk.core.walker import StepFilter, Walker

__all__ = [
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
    "Model",
    "Walkable",
    "Walker",
    "StepFilter",
    "GenerationResult",
]
