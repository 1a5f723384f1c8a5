"""Parsing and JSON (de)serialization of vectorization options."""

import json
from dataclasses import fields

from .types import OptionsError, VectorizeMode, VectorizeOptions

MODE_ALIASES = {
    "logo": VectorizeMode.LOGO,
    "poster": VectorizeMode.POSTER,
    "pixel": VectorizeMode.PIXEL_ART,
    "pixelart": VectorizeMode.PIXEL_ART,
    "pixel-art": VectorizeMode.PIXEL_ART,
}


def parse_mode(token: str) -> VectorizeMode:
    """Parse a mode token, accepting the pixel-art aliases.

    Args:
        token: Mode name, case-insensitive

    Returns:
        Matching VectorizeMode

    Raises:
        OptionsError: If the token is not a known mode
    """
    if isinstance(token, VectorizeMode):
        return token
    try:
        return MODE_ALIASES[str(token).strip().lower()]
    except KeyError:
        raise OptionsError("mode must be one of: logo, poster, pixel") from None


def options_to_dict(options: VectorizeOptions) -> dict:
    """Convert options to a plain dict with the mode as its token."""
    return {
        "colors": options.colors,
        "detail": options.detail,
        "smoothness": options.smoothness,
        "tolerance": options.tolerance,
        "mode": options.mode.value,
    }


def options_to_json(options: VectorizeOptions) -> str:
    """Serialize options to compact JSON."""
    return json.dumps(options_to_dict(options), separators=(",", ":"))


def options_from_dict(data: dict) -> VectorizeOptions:
    """Build options from a dict, falling back to defaults for missing keys.

    Unknown keys are ignored.

    Raises:
        OptionsError: If a known key holds a value of the wrong type
    """
    if not isinstance(data, dict):
        raise OptionsError(f"options must be a JSON object, got {type(data).__name__}")

    values = {}
    for f in fields(VectorizeOptions):
        if f.name not in data or data[f.name] is None:
            continue
        value = data[f.name]
        if f.name == "mode":
            values["mode"] = parse_mode(value)
        elif f.name == "colors":
            if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
                raise OptionsError(f"colors must be an integer, got {value!r}")
            values["colors"] = int(value)
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise OptionsError(f"{f.name} must be a number, got {value!r}")
            values[f.name] = float(value)

    return VectorizeOptions(**values)


def options_from_json(text: str) -> VectorizeOptions:
    """Deserialize options from JSON text.

    Raises:
        OptionsError: If the text is not valid JSON or holds invalid values
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise OptionsError(f"invalid options JSON: {e}") from e
    return options_from_dict(data)


def default_options_json() -> str:
    """Serialized default options."""
    return options_to_json(VectorizeOptions())
