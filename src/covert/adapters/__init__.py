"""Input adapters for native coverage formats."""

from covert.adapters.registry import (
    detect_input_adapter,
    get_input_adapter,
    input_formats,
    read_inputs,
)

__all__ = [
    "detect_input_adapter",
    "get_input_adapter",
    "input_formats",
    "read_inputs",
]
