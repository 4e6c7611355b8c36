#!/usr/bin/env python3
"""
KUBEFILL OPERATOR CONFIG
------------------------
The value set that drives substitution: target namespace, image references,
single-replica mode and the infrastructure name. It is read once per run
from a YAML config file, optionally overlaid with an images JSON file
(the format the operator's image references ConfigMap is mounted in).

Author: KubeFill Team
Date: 2026-01-16
"""

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kubefill.core.errors import ConfigError

logger = logging.getLogger("kubefill.config")

# camelCase config key -> OperatorConfig attribute
_STRING_KEYS = {
    "controllerImage": "controller_image",
    "cloudNodeImage": "cloud_node_image",
    "infrastructureName": "infrastructure_name",
}

# Keys read from the images JSON file
_IMAGE_KEYS = ("cloudControllerManager", "cloudNodeManager")


@dataclass(frozen=True)
class OperatorConfig:
    """
    Immutable configuration value set. An empty image reference means
    'leave the container image as it is'.
    """
    managed_namespace: str
    controller_image: str = ""
    cloud_node_image: str = ""
    is_single_replica: bool = False
    infrastructure_name: str = ""

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "OperatorConfig":
        """
        Builds a config from the camelCase mapping found in config files.

        Raises:
            ConfigError: when the mapping is missing managedNamespace or
                carries values of the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        namespace = data.get("managedNamespace")
        if not isinstance(namespace, str) or not namespace:
            raise ConfigError("Config key 'managedNamespace' must be a non-empty string")

        values: Dict[str, Any] = {"managed_namespace": namespace}
        for key, attr in _STRING_KEYS.items():
            raw = data.get(key, "")
            if raw is None:
                raw = ""
            if not isinstance(raw, str):
                raise ConfigError(f"Config key '{key}' must be a string, got {type(raw).__name__}")
            values[attr] = raw

        single = data.get("isSingleReplica", False)
        if not isinstance(single, bool):
            raise ConfigError(f"Config key 'isSingleReplica' must be a boolean, got {single!r}")
        values["is_single_replica"] = single

        unknown = set(data) - set(_STRING_KEYS) - {"managedNamespace", "isSingleReplica"}
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {sorted(unknown)}")

        return cls(**values)


def load_config(path: str) -> OperatorConfig:
    """Reads a YAML (or JSON) config file into an OperatorConfig."""
    config_path = Path(path)
    try:
        raw_text = config_path.read_text(encoding="utf-8-sig")
        data = YAML(typ="safe").load(raw_text)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read config {config_path}: {e}")
    except YAMLError as e:
        raise ConfigError(f"Unable to parse config {config_path}: {e}")

    logger.debug(f"Loaded config from {config_path}")
    return OperatorConfig.from_mapping(data or {})


def load_images(path: str) -> Tuple[str, str]:
    """
    Reads the image references file.

    Returns:
        (controller_image, cloud_node_image); either may be empty.
    """
    images_path = Path(path)
    try:
        with open(images_path, "r", encoding="utf-8-sig") as f:
            images = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Images file not found: {images_path}")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read images file {images_path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Unable to parse images file {images_path}: {e}")

    if not isinstance(images, dict):
        raise ConfigError(f"Images file {images_path} must contain a JSON object")

    for key in _IMAGE_KEYS:
        if not isinstance(images.get(key) or "", str):
            raise ConfigError(f"Image reference '{key}' must be a string")

    return images.get("cloudControllerManager") or "", images.get("cloudNodeManager") or ""


def compose_config(config_path: str, images_path: Optional[str] = None) -> OperatorConfig:
    """
    Loads the config file and overlays non-empty image references from
    the images file, if one is given.
    """
    config = load_config(config_path)
    if not images_path:
        return config

    controller_image, cloud_node_image = load_images(images_path)
    overrides = {}
    if controller_image:
        overrides["controller_image"] = controller_image
    if cloud_node_image:
        overrides["cloud_node_image"] = cloud_node_image

    if overrides:
        logger.info(f"Applying image overrides from {images_path}: {sorted(overrides)}")
        config = replace(config, **overrides)
    return config
