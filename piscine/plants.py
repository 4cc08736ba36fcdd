"""Describing plant records field by field, honouring field annotations."""

from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass
class UnknownPlant:
    flower_type: str
    leaf_type: str
    color: int = dataclasses.field(metadata={"color_scheme": "rgb"})


@dataclasses.dataclass
class AnotherUnknownPlant:
    flower_color: int
    leaf_type: str
    height: int = dataclasses.field(metadata={"unit": "inches"})


def _label(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def describe_plant(plant: Any) -> str:
    """One ``Name:value`` line per field, with unit and colour-scheme tags."""
    if not dataclasses.is_dataclass(plant) or isinstance(plant, type):
        raise TypeError("describe_plant expects a dataclass instance")
    lines = []
    for field in dataclasses.fields(plant):
        key = _label(field.name)
        unit = field.metadata.get("unit")
        if unit:
            key += f"(unit={unit})"
        scheme = field.metadata.get("color_scheme")
        if scheme:
            key = f"Color(color_scheme={scheme})"
        lines.append(f"{key}:{_value(getattr(plant, field.name))}")
    return "\n".join(lines)


if __name__ == "__main__":
    print(describe_plant(UnknownPlant("rosa", "lanceolate", 255)))
    print("-" * 20)
    print(describe_plant(AnotherUnknownPlant(10, "lanceolate", 15)))