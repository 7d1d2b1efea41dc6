"""Serialization of flat package/version mappings."""

from __future__ import annotations

import csv
import io
import json
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from enum import Enum

import yaml

_BARE_TOML_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class OutputFormat(str, Enum):
    """Formats supported by ``ls --output``."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    XML = "xml"
    CSV = "csv"


def to_json(data: Mapping[str, str]) -> str:
    return json.dumps(dict(data), indent=2)


def to_yaml(data: Mapping[str, str]) -> str:
    return yaml.safe_dump(dict(data), sort_keys=False, default_flow_style=False)


def _toml_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_toml(data: Mapping[str, str]) -> str:
    """One table per package holding its version."""
    blocks = []
    for name, version in data.items():
        key = name if _BARE_TOML_KEY.match(name) else _toml_string(name)
        blocks.append(f"[{key}]\nversion = {_toml_string(version)}\n")
    return "\n".join(blocks)


def to_xml(data: Mapping[str, str]) -> str:
    root = ET.Element("packages")
    for name, version in data.items():
        package = ET.SubElement(root, "package")
        ET.SubElement(package, "name").text = name
        ET.SubElement(package, "version").text = version
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


def to_csv(data: Mapping[str, str]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["package", "version"])
    for name, version in data.items():
        writer.writerow([name, version])
    return buffer.getvalue().rstrip("\n")


SERIALIZERS: dict[OutputFormat, Callable[[Mapping[str, str]], str]] = {
    OutputFormat.JSON: to_json,
    OutputFormat.YAML: to_yaml,
    OutputFormat.TOML: to_toml,
    OutputFormat.XML: to_xml,
    OutputFormat.CSV: to_csv,
}


def serialize(data: Mapping[str, str], fmt: OutputFormat | str) -> str:
    """Serialize ``data`` in the given format.

    Raises:
        ValueError: If the format is unknown.
    """
    try:
        output_format = OutputFormat(fmt)
    except ValueError:
        raise ValueError(f"Unknown output format: {fmt}") from None
    return SERIALIZERS[output_format](data)
