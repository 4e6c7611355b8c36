#!/usr/bin/env python3
"""
KUBEFILL LOADER - YAML -> Typed Manifests
-----------------------------------------
Turns multi-document YAML into typed ManifestObjects and back into plain
mappings. Kinds are routed through KIND_REGISTRY; anything not registered
becomes a GenericObject. Keys the models do not know are carried along in
the `extra` fields so nothing is lost on export.

Author: KubeFill Team
Date: 2026-01-16
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kubefill.core.errors import ManifestError
from kubefill.core.models import (
    ConfigMap,
    Container,
    DaemonSet,
    Deployment,
    EnvVar,
    GenericObject,
    ManifestObject,
    ObjectMeta,
    PodTemplate,
)

logger = logging.getLogger("kubefill.loader")

_COMMON_KEYS = ("apiVersion", "kind", "metadata")


def _split(raw: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    """Returns the keys of `raw` not listed in `known`."""
    return {k: v for k, v in raw.items() if k not in known}


def _expect_mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"Expected a mapping at {where}, got {type(value).__name__}")
    return value


def _expect_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestError(f"Expected a list at {where}, got {type(value).__name__}")
    return value


def _expect_string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ManifestError(f"Expected a string at {where}, got {type(value).__name__}")
    return value


# --- Parsing ---------------------------------------------------------------

def _parse_meta(raw: Any) -> ObjectMeta:
    meta = _expect_mapping(raw, "metadata")
    return ObjectMeta(
        name=meta.get("name") or "",
        namespace=meta.get("namespace") or "",
        labels=dict(_expect_mapping(meta.get("labels"), "metadata.labels")),
        extra=_split(meta, ("name", "namespace", "labels")),
    )


def _parse_env(raw: Any, where: str) -> List[EnvVar]:
    env = []
    for i, item in enumerate(_expect_list(raw, where)):
        item = _expect_mapping(item, f"{where}[{i}]")
        value = item.get("value")
        env.append(EnvVar(
            name=_expect_string(item.get("name"), f"{where}[{i}].name"),
            value=None if value is None else str(value),
            extra=_split(item, ("name", "value")),
        ))
    return env


def _parse_template(raw: Any, where: str) -> PodTemplate:
    template = _expect_mapping(raw, where)
    spec = _expect_mapping(template.get("spec"), f"{where}.spec")

    containers = []
    for i, item in enumerate(_expect_list(spec.get("containers"), f"{where}.spec.containers")):
        path = f"{where}.spec.containers[{i}]"
        item = _expect_mapping(item, path)
        containers.append(Container(
            name=_expect_string(item.get("name"), f"{path}.name"),
            image=_expect_string(item.get("image"), f"{path}.image"),
            env=_parse_env(item.get("env"), f"{path}.env"),
            extra=_split(item, ("name", "image", "env")),
        ))

    return PodTemplate(
        metadata=_expect_mapping(template.get("metadata"), f"{where}.metadata"),
        containers=containers,
        spec_extra=_split(spec, ("containers",)),
    )


def _load_config_map(doc: Dict[str, Any]) -> ManifestObject:
    return ConfigMap(
        api_version=doc.get("apiVersion", "v1"),
        metadata=_parse_meta(doc.get("metadata")),
        data=dict(_expect_mapping(doc.get("data"), "data")),
        extra=_split(doc, _COMMON_KEYS + ("data",)),
    )


def _load_deployment(doc: Dict[str, Any]) -> ManifestObject:
    spec = _expect_mapping(doc.get("spec"), "spec")
    replicas = spec.get("replicas")
    if replicas is not None and (isinstance(replicas, bool) or not isinstance(replicas, int)):
        raise ManifestError(f"spec.replicas must be an integer, got {replicas!r}")
    return Deployment(
        api_version=doc.get("apiVersion", "apps/v1"),
        metadata=_parse_meta(doc.get("metadata")),
        replicas=replicas,
        template=_parse_template(spec.get("template"), "spec.template"),
        spec_extra=_split(spec, ("replicas", "template")),
        extra=_split(doc, _COMMON_KEYS + ("spec",)),
    )


def _load_daemon_set(doc: Dict[str, Any]) -> ManifestObject:
    spec = _expect_mapping(doc.get("spec"), "spec")
    return DaemonSet(
        api_version=doc.get("apiVersion", "apps/v1"),
        metadata=_parse_meta(doc.get("metadata")),
        template=_parse_template(spec.get("template"), "spec.template"),
        spec_extra=_split(spec, ("template",)),
        extra=_split(doc, _COMMON_KEYS + ("spec",)),
    )


KIND_REGISTRY: Dict[str, Callable[[Dict[str, Any]], ManifestObject]] = {
    "ConfigMap": _load_config_map,
    "Deployment": _load_deployment,
    "DaemonSet": _load_daemon_set,
}


def object_from_dict(doc: Any) -> ManifestObject:
    """Builds the typed variant for one parsed manifest document."""
    if not isinstance(doc, dict):
        raise ManifestError(f"Manifest document must be a mapping, got {type(doc).__name__}")

    kind = _expect_string(doc.get("kind"), "kind")
    if not kind:
        raise ManifestError("Manifest document is missing 'kind'")

    builder = KIND_REGISTRY.get(kind)
    if builder is None:
        logger.debug(f"No dedicated model for kind {kind}; using GenericObject")
        return GenericObject(
            api_version=doc.get("apiVersion", "v1"),
            kind=kind,
            metadata=_parse_meta(doc.get("metadata")),
            extra=_split(doc, _COMMON_KEYS),
        )
    return builder(doc)


def load_objects(text: str) -> List[ManifestObject]:
    """Parses multi-document YAML text, skipping empty documents."""
    try:
        docs = list(YAML(typ="safe").load_all(text))
    except YAMLError as e:
        raise ManifestError(f"Unable to parse manifest YAML: {e}")

    objects = []
    for i, doc in enumerate(docs):
        if doc is None:
            logger.warning(f"Skipping empty YAML document #{i}")
            continue
        objects.append(object_from_dict(doc))
    return objects


def load_file(path: str) -> List[ManifestObject]:
    """Reads a manifest file (BOM-aware) and parses it."""
    return load_objects(Path(path).read_text(encoding="utf-8-sig"))


# --- Serialization ---------------------------------------------------------

def _meta_to_dict(meta: ObjectMeta) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if meta.name:
        out["name"] = meta.name
    if meta.namespace:
        out["namespace"] = meta.namespace
    if meta.labels:
        out["labels"] = dict(meta.labels)
    out.update(meta.extra)
    return out


def _container_to_dict(container: Container) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": container.name}
    if container.image:
        out["image"] = container.image
    out.update(container.extra)
    if container.env:
        env = []
        for var in container.env:
            item: Dict[str, Any] = {"name": var.name}
            if var.value is not None:
                item["value"] = var.value
            item.update(var.extra)
            env.append(item)
        out["env"] = env
    return out


def _template_to_dict(template: PodTemplate) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if template.metadata:
        out["metadata"] = template.metadata
    spec: Dict[str, Any] = {"containers": [_container_to_dict(c) for c in template.containers]}
    spec.update(template.spec_extra)
    out["spec"] = spec
    return out


def object_to_dict(obj: ManifestObject) -> Dict[str, Any]:
    """Converts a typed object back to a plain Kubernetes mapping."""
    out: Dict[str, Any] = {
        "apiVersion": obj.api_version,
        "kind": obj.kind,
        "metadata": _meta_to_dict(obj.metadata),
    }

    if isinstance(obj, ConfigMap) and obj.data:
        out["data"] = dict(obj.data)

    template = obj.pod_template()
    if template is not None:
        spec: Dict[str, Any] = {}
        if obj.has_replica_count() and obj.replicas is not None:
            spec["replicas"] = obj.replicas
        spec.update(getattr(obj, "spec_extra", {}))
        spec["template"] = _template_to_dict(template)
        out["spec"] = spec

    out.update(obj.extra)
    return out
