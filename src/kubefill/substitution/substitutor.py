#!/usr/bin/env python3
"""
KUBEFILL SUBSTITUTOR
--------------------
Entry point of the substitution layer: fills operator config values into
an ordered list of manifest objects.

Author: KubeFill Team
Date: 2026-01-16
"""

from typing import List, Sequence

from kubefill.core.config import OperatorConfig
from kubefill.core.models import ManifestObject
from kubefill.substitution.dispatcher import fill_object


def fill_config_values(config: OperatorConfig, objects: Sequence[ManifestObject]) -> List[ManifestObject]:
    """
    Returns new objects with namespace, images, replicas and env values
    substituted. Output order and length match `objects`; inputs are left
    untouched and share no state with the result.
    """
    updated = []
    for obj in objects:
        updated.append(fill_object(obj, config))
    return updated
