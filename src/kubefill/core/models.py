#!/usr/bin/env python3
"""
KUBEFILL CORE MODELS
--------------------
Defines the in-memory manifest objects that the substitution layer works on.
Each Kubernetes kind the operator ships gets its own variant; every other
kind is carried as a GenericObject so it can still receive a namespace.

Fields the models do not know about are kept in `extra` / `spec_extra`
so a manifest survives a load -> fill -> export cycle intact.

Author: KubeFill Team
Date: 2026-01-16
"""

from dataclasses import dataclass, field
from typing import Optional, Any, Dict, List


@dataclass
class EnvVar:
    """A single container environment variable."""
    name: str
    value: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # valueFrom and friends


@dataclass
class Container:
    """
    A container inside a pod template.

    The name identifies the container's role (e.g. 'cloud-controller-manager').
    """
    name: str = ""
    image: str = ""
    env: List[EnvVar] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PodTemplate:
    metadata: Dict[str, Any] = field(default_factory=dict)
    containers: List[Container] = field(default_factory=list)
    spec_extra: Dict[str, Any] = field(default_factory=dict)  # volumes, tolerations, ...


@dataclass
class ObjectMeta:
    """Kind-independent metadata shared by every manifest object."""
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ManifestObject:
    """
    Base variant for one Kubernetes resource.

    Two capabilities are exposed independently of each other:
      * pod_template()      -> the embedded PodTemplate, or None
      * has_replica_count() -> True if the kind carries `replicas`
    """
    api_version: str = "v1"
    kind: str = ""
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    extra: Dict[str, Any] = field(default_factory=dict)

    def pod_template(self) -> Optional[PodTemplate]:
        return None

    def has_replica_count(self) -> bool:
        return False


@dataclass
class ConfigMap(ManifestObject):
    api_version: str = "v1"
    kind: str = "ConfigMap"
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class Deployment(ManifestObject):
    api_version: str = "apps/v1"
    kind: str = "Deployment"
    replicas: Optional[int] = None  # None means the field is absent from the manifest
    template: PodTemplate = field(default_factory=PodTemplate)
    spec_extra: Dict[str, Any] = field(default_factory=dict)

    def pod_template(self) -> Optional[PodTemplate]:
        return self.template

    def has_replica_count(self) -> bool:
        return True


@dataclass
class DaemonSet(ManifestObject):
    api_version: str = "apps/v1"
    kind: str = "DaemonSet"
    template: PodTemplate = field(default_factory=PodTemplate)
    spec_extra: Dict[str, Any] = field(default_factory=dict)

    def pod_template(self) -> Optional[PodTemplate]:
        return self.template


@dataclass
class GenericObject(ManifestObject):
    """
    Any kind without a dedicated variant (Service, ServiceAccount, RBAC...).
    Its body lives entirely in `extra`; only common metadata is touched.
    """
