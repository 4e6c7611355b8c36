#!/usr/bin/env python3
"""
KUBEFILL PATCHERS - Container & Environment Substitution
--------------------------------------------------------
Leaf-level rewrites applied inside a pod template:
  * image references for the cloud controller / cloud node manager roles
  * values of well-known environment variables

Every function returns freshly built values. Nothing passed in is written to.

Author: KubeFill Team
Date: 2026-01-16
"""

import copy
import logging
from typing import Callable, Dict, List

from kubefill.core.config import OperatorConfig
from kubefill.core.models import Container, EnvVar

logger = logging.getLogger("kubefill.substitution")

CLOUD_CONTROLLER_MANAGER_NAME = "cloud-controller-manager"
CLOUD_NODE_MANAGER_NAME = "cloud-node-manager"

# Env var name -> config value. Substituted unconditionally, even when empty.
ENV_SUBSTITUTIONS: Dict[str, Callable[[OperatorConfig], str]] = {
    "OCP_INFRASTRUCTURE_NAME": lambda config: config.infrastructure_name,
}

# Container name -> config image. Substituted only when the image is non-empty.
IMAGE_SUBSTITUTIONS: Dict[str, Callable[[OperatorConfig], str]] = {
    CLOUD_CONTROLLER_MANAGER_NAME: lambda config: config.controller_image,
    CLOUD_NODE_MANAGER_NAME: lambda config: config.cloud_node_image,
}


def patch_env(env: List[EnvVar], config: OperatorConfig) -> List[EnvVar]:
    """
    Returns a copy of `env` with recognized variables set from the config.
    Order and length are preserved; unrecognized names keep their value.
    """
    patched = []
    for var in env:
        new_var = copy.deepcopy(var)
        lookup = ENV_SUBSTITUTIONS.get(var.name)
        if lookup is not None:
            new_var.value = lookup(config)
            logger.debug(f"Set env {var.name}={new_var.value!r}")
        patched.append(new_var)
    return patched


def patch_containers(containers: List[Container], config: OperatorConfig) -> List[Container]:
    """
    Returns a copy of `containers` with role images substituted and env
    variables patched on every container.
    """
    patched = []
    for container in containers:
        new_container = copy.deepcopy(container)

        lookup = IMAGE_SUBSTITUTIONS.get(container.name)
        if lookup is not None:
            image = lookup(config)
            if image:
                logger.debug(f"Substituted image for {container.name}: {container.image} -> {image}")
                new_container.image = image

        new_container.env = patch_env(container.env, config)
        patched.append(new_container)
    return patched
