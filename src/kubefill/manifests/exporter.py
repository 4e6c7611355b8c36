#!/usr/bin/env python3
"""
KUBEFILL EXPORTER - Typed Manifests -> YAML
-------------------------------------------
Author: KubeFill Team
Date: 2026-01-16
"""

import io
from typing import Any, List

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from kubefill.core.models import ManifestObject
from kubefill.manifests.loader import object_to_dict


class KubeExporter:
    """
    Serializes manifest objects into one multi-document YAML string.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        # Standard K8s: 2 spaces, sequences indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data"]

    def _to_commented(self, data: Any, top_level: bool = False) -> Any:
        """
        Recursively rebuilds mappings as CommentedMaps so the round-trip
        dumper keeps insertion order. Only the top level is reordered.
        """
        if isinstance(data, list):
            return [self._to_commented(item) for item in data]
        if not isinstance(data, dict):
            return data

        keys = list(data.keys())
        if top_level:
            def sort_logic(key):
                if key in self.preferred_order:
                    return self.preferred_order.index(key)
                # Unknown keys keep their relative original position
                return len(self.preferred_order) + keys.index(key)
            keys = sorted(keys, key=sort_logic)

        result = CommentedMap()
        for key in keys:
            result[key] = self._to_commented(data[key])
        return result

    def export(self, objects: List[ManifestObject]) -> str:
        """
        Exports objects into a single string with explicit '---' separators.
        """
        stream = io.StringIO()
        for i, obj in enumerate(objects):
            if i > 0:
                stream.write("---\n")
            self.yaml.dump(self._to_commented(object_to_dict(obj), top_level=True), stream)
        return stream.getvalue()
