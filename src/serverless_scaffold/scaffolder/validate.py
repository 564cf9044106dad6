"""Parse-check rendered manifests before they are written.

A generated ``package.json`` or ``template.yaml`` that does not parse is a
generator bug, so it is reported as :class:`ManifestValidationError` instead
of being left for the user to discover.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

from serverless_scaffold.scaffolder.errors import ManifestValidationError


class _CloudFormationLoader(yaml.SafeLoader):
    """Safe loader that accepts CloudFormation short-form intrinsics.

    ``!Ref Foo`` / ``!GetAtt Foo.Arn`` / ``!Sub "..."`` load as
    ``{"Ref": ...}`` / ``{"Fn::GetAtt": ...}`` / ``{"Fn::Sub": ...}``.
    """


def _intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict[str, Any]:
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    key = "Ref" if tag_suffix == "Ref" else f"Fn::{tag_suffix}"
    return {key: value}


_CloudFormationLoader.add_multi_constructor("!", _intrinsic)


def load_yaml(text: str) -> Any:
    """Load YAML text, tolerating CloudFormation ``!Tag`` intrinsics."""
    return yaml.load(text, Loader=_CloudFormationLoader)  # noqa: S506


def validate_manifest(path: str | Path, text: str) -> None:
    """Raise if *text* is not a valid manifest for *path*'s suffix.

    ``.json``, ``.yaml``/``.yml`` and ``.toml`` are checked; any other
    suffix passes through untouched.

    Raises:
        ManifestValidationError: If the content does not parse.
    """
    suffix = Path(path).suffix.lower()
    try:
        if suffix == ".json":
            json.loads(text)
        elif suffix in (".yaml", ".yml"):
            list(yaml.load_all(text, Loader=_CloudFormationLoader))  # noqa: S506
        elif suffix == ".toml":
            tomllib.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ManifestValidationError(path, str(exc)) from exc
