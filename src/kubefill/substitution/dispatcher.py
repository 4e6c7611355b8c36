#!/usr/bin/env python3
"""
KUBEFILL DISPATCHER - Per-Object Substitution
---------------------------------------------
Applies the operator config to a single manifest object. The object is
copied first; which rules run is decided by the capabilities the concrete
variant exposes (pod template, replica count), so a new workload kind only
needs to implement those accessors.

Author: KubeFill Team
Date: 2026-01-16
"""

import copy
import logging

from kubefill.core.config import OperatorConfig
from kubefill.core.models import ManifestObject
from kubefill.substitution.patchers import patch_containers

logger = logging.getLogger("kubefill.substitution")


def fill_object(obj: ManifestObject, config: OperatorConfig) -> ManifestObject:
    """
    Returns a patched copy of `obj` of the same concrete class.

    `obj` must not be None; that is a caller contract violation.
    """
    patched = copy.deepcopy(obj)

    # Namespace always follows the config, whatever the manifest said
    patched.metadata.namespace = config.managed_namespace

    template = obj.pod_template()
    if template is not None:
        patched.pod_template().containers = patch_containers(template.containers, config)

    if patched.has_replica_count() and config.is_single_replica:
        logger.debug(f"Forcing single replica on {patched.kind}/{patched.metadata.name} "
                      f"(was {patched.replicas})")
        patched.replicas = 1

    return patched
