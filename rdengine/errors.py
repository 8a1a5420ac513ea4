"""Exceptions raised by the reaction-diffusion engine."""


class RDEngineError(Exception):
    pass


class ConfigurationError(RDEngineError, ValueError):
    """A configure() call was rejected; the engine keeps its previous state."""
