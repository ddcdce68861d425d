"""Error taxonomy shared by the EcoScout pipeline.

ConfigurationError:
    A required API key is missing. Fatal, raised before any network call.

TransportError:
    Network failure, timeout, or non-2xx response from a search call.

GenerationError:
    Any failure of a Gemini/Imagen call, including a response that lacks the
    expected text path. Not retried.

FormatError:
    Expected JSON could not be extracted from AI output.

ShapeError:
    JSON parsed but required keys were absent. Treated as a FormatError.

NotFoundError:
    A requested item (e.g. a catalogue article id) does not exist. Client error.

Recoverable errors are absorbed by fallback layers and only logged.
Unrecovered errors surface at the entry points as a generic message.
"""


class EcoScoutError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(EcoScoutError):
    """Required configuration (API key) is missing or invalid."""


class TransportError(EcoScoutError):
    """External call failed at the network or HTTP-status level."""


class GenerationError(EcoScoutError):
    """The generative model call failed or returned no usable output."""


class FormatError(EcoScoutError):
    """AI output did not contain parseable JSON."""


class NotFoundError(EcoScoutError):
    """A requested item does not exist."""


class ShapeError(FormatError):
    """Parsed JSON is missing required keys (or they have the wrong shape).

    Attributes:
        missing: Names or dotted paths of the offending keys
    """

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"AI output is missing required keys: {', '.join(self.missing)}")

    @classmethod
    def from_validation(cls, error) -> "ShapeError":
        """Build from a pydantic ValidationError, naming each failing field path."""
        paths = []
        for item in error.errors():
            path = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
            if path not in paths:
                paths.append(path)
        return cls(paths)
