"""Failures raised by the deck generation pipeline."""


class GenerationError(Exception):
    """Base class; every pipeline failure is terminal for its request."""


class InputError(GenerationError):
    """Source text is missing or blank. Raised before the model is called."""


class OracleError(GenerationError):
    """The model could not be reached, failed, or returned no text."""


class ParseError(GenerationError):
    """The model's text could not be reduced to a JSON array."""


class PersistenceError(GenerationError):
    """The deck could not be written to the database."""
