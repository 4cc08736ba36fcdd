"""Recipe databases in XML and JSON: reading, converting and comparing."""

from __future__ import annotations

import argparse
import json
import sys
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class Ingredient:
    name: str
    count: str = ""
    unit: str = ""


@dataclass
class Cake:
    name: str
    time: str = ""
    ingredients: list[Ingredient] = field(default_factory=list)


@dataclass
class RecipeDatabase:
    cakes: list[Cake] = field(default_factory=list)


# ---------------------------------------------------------------- reading


def _json_string(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _json_objects(obj: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"field {key!r} must be a list of objects")
    return value


def read_json(path: str | Path) -> RecipeDatabase:
    """Load a recipe database from a JSON file."""
    data = json.loads(Path(path).read_bytes())
    if data is None:
        return RecipeDatabase()
    if not isinstance(data, dict):
        raise ValueError("recipe database must be a JSON object")
    cakes = [
        Cake(
            name=_json_string(cake, "name"),
            time=_json_string(cake, "time"),
            ingredients=[
                Ingredient(
                    name=_json_string(item, "ingredient_name"),
                    count=_json_string(item, "ingredient_count"),
                    unit=_json_string(item, "ingredient_unit"),
                )
                for item in _json_objects(cake, "ingredients")
            ],
        )
        for cake in _json_objects(data, "cake")
    ]
    return RecipeDatabase(cakes)


def _xml_text(parent: ET.Element, path: str) -> str:
    element = parent.find(path)
    if element is None:
        return ""
    return "".join(element.itertext())


def read_xml(path: str | Path) -> RecipeDatabase:
    """Load a recipe database from an XML file rooted at ``<recipes>``."""
    try:
        root = ET.fromstring(Path(path).read_bytes())
    except ET.ParseError as exc:
        raise ValueError(f"malformed XML: {exc}") from exc
    if root.tag != "recipes":
        raise ValueError(f"expected element type <recipes> but have <{root.tag}>")
    cakes = [
        Cake(
            name=_xml_text(cake, "name"),
            time=_xml_text(cake, "stovetime"),
            ingredients=[
                Ingredient(
                    name=_xml_text(item, "itemname"),
                    count=_xml_text(item, "itemcount"),
                    unit=_xml_text(item, "itemunit"),
                )
                for item in cake.findall("ingredients/item")
            ],
        )
        for cake in root.findall("cake")
    ]
    return RecipeDatabase(cakes)


def read_database(path: str | Path) -> RecipeDatabase:
    """Load a database, choosing the reader by file extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return read_json(path)
    if suffix == ".xml":
        return read_xml(path)
    raise ValueError("Invalid file extension")


# ---------------------------------------------------------------- writing

_JSON_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def to_json(database: RecipeDatabase) -> str:
    """Serialise to JSON indented with four spaces."""
    document = {
        "cake": [
            {
                "name": cake.name,
                "time": cake.time,
                "ingredients": [
                    {
                        "ingredient_name": item.name,
                        "ingredient_count": item.count,
                        "ingredient_unit": item.unit,
                    }
                    for item in cake.ingredients
                ],
            }
            for cake in database.cakes
        ]
    }
    text = json.dumps(document, indent=4, ensure_ascii=False)
    return "".join(_JSON_ESCAPES.get(char, char) for char in text)


_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&#34;",
    "'": "&#39;",
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
}


def _xml_escape(text: str) -> str:
    return "".join(_XML_ESCAPES.get(char, char) for char in text)


def to_xml(database: RecipeDatabase) -> str:
    """Serialise to XML indented with four spaces."""
    indent = "    "
    lines = ["<recipes>"]

    def leaf(depth: int, tag: str, text: str) -> None:
        lines.append(f"{indent * depth}<{tag}>{_xml_escape(text)}</{tag}>")

    for cake in database.cakes:
        lines.append(f"{indent}<cake>")
        leaf(2, "name", cake.name)
        leaf(2, "stovetime", cake.time)
        if cake.ingredients:
            lines.append(f"{indent * 2}<ingredients>")
            for item in cake.ingredients:
                lines.append(f"{indent * 3}<item>")
                leaf(4, "itemname", item.name)
                leaf(4, "itemcount", item.count)
                leaf(4, "itemunit", item.unit)
                lines.append(f"{indent * 3}</item>")
            lines.append(f"{indent * 2}</ingredients>")
        lines.append(f"{indent}</cake>")
    lines.append("</recipes>")
    return "\n".join(lines)


# ---------------------------------------------------------------- comparing


def compare_recipes(original: Cake, new: Cake) -> list[str]:
    """Differences between two versions of the same cake."""
    changes: list[str] = []
    cake = original.name
    if original.time != new.time:
        changes.append(
            f'CHANGED cooking time for cake "{cake}" - "{new.time}" instead of "{original.time}"'
        )

    remaining = {item.name: item for item in original.ingredients}
    for item in new.ingredients:
        old = remaining.pop(item.name, None)
        if old is None:
            if item.unit:
                changes.append(
                    f'ADDED ingredient "{item.name}" with unit "{item.unit}" for cake "{cake}"'
                )
            else:
                changes.append(f'ADDED ingredient "{item.name}" for cake "{cake}"')
            continue
        if old.count != item.count:
            changes.append(
                f'CHANGED unit count for ingredient "{item.name}" for cake "{cake}"'
                f' - "{item.count}" instead of "{old.count}"'
            )
        if old.unit != item.unit and old.unit and item.unit:
            changes.append(
                f'CHANGED unit for ingredient "{item.name}" for cake "{cake}"'
                f' - "{item.unit}" instead of "{old.unit}"'
            )

    for item in remaining.values():
        if item.unit:
            changes.append(
                f'REMOVED ingredient "{item.name}" with unit "{item.unit}" for cake "{cake}"'
            )
        else:
            changes.append(f'REMOVED ingredient "{item.name}" for cake "{cake}"')
    return changes


def compare_databases(original: RecipeDatabase, new: RecipeDatabase) -> list[str]:
    """Differences between two recipe databases, cake by cake."""
    changes: list[str] = []
    new_by_name: dict[str, Cake] = {}
    for cake in new.cakes:
        new_by_name.setdefault(cake.name, cake)
    for cake in original.cakes:
        match = new_by_name.get(cake.name)
        if match is None:
            changes.append(f'REMOVED cake "{cake.name}"')
        else:
            changes.extend(compare_recipes(cake, match))
    original_names = {cake.name for cake in original.cakes}
    changes.extend(
        f'ADDED cake "{cake.name}"' for cake in new.cakes if cake.name not in original_names
    )
    return changes


# ---------------------------------------------------------------- commands


def convert_main(argv: Sequence[str] | None = None) -> int:
    """Print an XML database as JSON, or a JSON database as XML."""
    parser = argparse.ArgumentParser(description="Convert a recipe database between XML and JSON.")
    parser.add_argument("-f", dest="file", required=True, help="Database file (.xml or .json)")
    args = parser.parse_args(argv)

    suffix = Path(args.file).suffix.lower()
    if suffix not in (".json", ".xml"):
        print("Invalid file extension")
        return 1
    try:
        database = read_database(args.file)
    except (OSError, ValueError) as exc:
        print("Error reading file:", exc)
        return 1

    if suffix == ".json":
        print("XML:", to_xml(database))
    else:
        print("JSON:", to_json(database))
    return 0


def compare_main(argv: Sequence[str] | None = None) -> int:
    """Compare an original XML database with a new JSON one."""
    parser = argparse.ArgumentParser(description="Compare recipe databases.")
    parser.add_argument("-old", "--old", default="", help="Path to the original XML database")
    parser.add_argument("-new", "--new", default="", help="Path to the new JSON database")
    args = parser.parse_args(argv)

    if not args.old:
        print("Path to the original XML database is required", file=sys.stderr)
        return 1
    if not args.new:
        print("Path to the new JSON database is required", file=sys.stderr)
        return 1
    try:
        original = read_xml(args.old)
    except (OSError, ValueError) as exc:
        print("Failed to read the original XML database:", exc, file=sys.stderr)
        return 1
    try:
        new = read_json(args.new)
    except (OSError, ValueError) as exc:
        print("Failed to read the new JSON database:", exc, file=sys.stderr)
        return 1

    for line in compare_databases(original, new):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(compare_main())