"""Reaction–diffusion pattern engine: periodic two-chemical grid, selectable kinetics,
live forcing, eased parameter changes and parameter-space journeys."""

from .config import EngineConfig, SeedConfig, ColorConfig, COLOR_SCHEMES
from .engine import Engine
from .errors import RDEngineError, ConfigurationError
from .forcing import Tool, Channel
from .kinetics import Model, Preset, get_presets
from .params import Parameters, JourneyType, ParameterController

__version__ = "0.1.0"
