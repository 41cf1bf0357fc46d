"""SignalK delta envelope contracts.

The envelope shape is a compatibility contract with the SignalK server:
field names and nesting must be emitted verbatim.

    {
        "updates": [
            {
                "source": {"label": "signalk-my-plugin"},
                "values": [{"path": "navigation.speedOverGround", "value": 3.2}],
            }
        ]
    }
"""

from typing import Any, TypedDict


class PathValue(TypedDict):
    """One SignalK path and the value being published for it."""

    path: str
    value: Any


class DeltaSource(TypedDict):
    label: str


class DeltaUpdate(TypedDict):
    source: DeltaSource
    values: list[PathValue]


class Delta(TypedDict):
    updates: list[DeltaUpdate]


def build_delta(label: str, values: list[PathValue]) -> Delta:
    """Wrap path/value pairs in a single-update delta envelope.

    Args:
        label: Source label, normally the publishing plugin's id
        values: Path/value pairs, passed through unchanged (not copied)

    Returns:
        Delta envelope with exactly one update
    """
    return {
        "updates": [
            {
                "source": {"label": label},
                "values": values,
            }
        ]
    }
