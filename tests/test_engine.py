#!/usr/bin/env python3
"""
KUBEFILL ENGINE SUITE
---------------------
Exercises the RenderEngine against a temporary workspace:
1. Preview vs. in-place writes
2. Per-file failures inside a batch
3. Missing files and summaries

Author: KubeFill Team
Date: 2026-01-16
"""

import pytest
from ruamel.yaml import YAML

from kubefill.core.config import OperatorConfig
from kubefill.core.engine import RenderEngine

DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: cloud-controller-manager
  namespace: wrong
spec:
  replicas: 2
  template:
    spec:
      containers:
      - name: cloud-controller-manager
        image: placeholder
"""

CONFIG = OperatorConfig(
    managed_namespace="openshift-cloud-controller-manager",
    controller_image="ccm:4.20",
    is_single_replica=True,
)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "ccm.yaml").write_text(DEPLOYMENT, encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "cm.yaml").write_text(
        "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a manifest", encoding="utf-8")
    return tmp_path


def _load(text):
    return [d for d in YAML(typ="safe").load_all(text) if d is not None]


def test_render_text_substitutes_values():
    engine = RenderEngine(CONFIG)
    deployment = engine.render_text(DEPLOYMENT)[0]

    assert deployment.metadata.namespace == "openshift-cloud-controller-manager"
    assert deployment.replicas == 1
    assert deployment.template.containers[0].image == "ccm:4.20"


def test_render_file_preview_does_not_write(workspace):
    engine = RenderEngine(CONFIG, str(workspace))
    report = engine.render_file("ccm.yaml", dry_run=True)

    assert report["success"] is True
    assert report["status"] == "PREVIEW"
    assert report["kinds"] == ["Deployment"]
    assert report["written"] is False
    assert (workspace / "ccm.yaml").read_text(encoding="utf-8") == DEPLOYMENT

    rendered = _load(report["rendered_content"])[0]
    assert rendered["metadata"]["namespace"] == "openshift-cloud-controller-manager"
    assert rendered["spec"]["replicas"] == 1


def test_render_file_writes_in_place(workspace):
    engine = RenderEngine(CONFIG, str(workspace))
    report = engine.render_file("ccm.yaml", dry_run=False)

    assert report["status"] == "RENDERED"
    assert report["written"] is True
    written = _load((workspace / "ccm.yaml").read_text(encoding="utf-8"))[0]
    assert written["spec"]["template"]["spec"]["containers"][0]["image"] == "ccm:4.20"
    assert not list(workspace.glob("*.kubefill.tmp"))

    # A second pass has nothing left to change
    assert engine.render_file("ccm.yaml", dry_run=False)["status"] == "UNCHANGED"


def test_render_file_missing(workspace):
    report = RenderEngine(CONFIG, str(workspace)).render_file("nope.yaml")
    assert report["status"] == "FILE_NOT_FOUND"
    assert report["success"] is False


def test_render_directory_continues_past_bad_files(workspace):
    (workspace / "broken.yaml").write_text("kind: [unterminated\n", encoding="utf-8")
    engine = RenderEngine(CONFIG, str(workspace))
    seen = []

    reports = engine.render_directory(".yaml", progress_callback=lambda done, total: seen.append((done, total)))

    by_path = {r["file_path"]: r for r in reports}
    assert set(by_path) == {"ccm.yaml", "broken.yaml", "nested/cm.yaml"}
    assert by_path["broken.yaml"]["status"] == "ENGINE_ERROR"
    assert by_path["nested/cm.yaml"]["kinds"] == ["ConfigMap"]
    assert seen[-1] == (3, 3)

    summary = engine.generate_summary(reports)
    assert summary["total_files"] == 3
    assert summary["successful"] == 2
    assert summary["system_errors"] == 1
    assert summary["objects_rendered"] == 2


def test_summary_of_nothing():
    assert RenderEngine(CONFIG).generate_summary([])["total_files"] == 0


def test_render_directory_isolates_wrongly_typed_fields(tmp_path):
    (tmp_path / "a.yaml").write_text("apiVersion: apps/v1\nkind: [Deployment]\n", encoding="utf-8")
    (tmp_path / "b.yaml").write_text(
        "apiVersion: apps/v1\nkind: Deployment\nspec:\n  template:\n    spec:\n"
        "      containers:\n      - name: 42\n        image: x\n", encoding="utf-8")
    (tmp_path / "c.yaml").write_text(
        "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\n", encoding="utf-8")

    reports = RenderEngine(CONFIG, str(tmp_path)).render_directory(".yaml")

    by_path = {r["file_path"]: r for r in reports}
    assert by_path["a.yaml"]["status"] == "ENGINE_ERROR"
    assert by_path["b.yaml"]["status"] == "ENGINE_ERROR"
    assert by_path["c.yaml"]["success"] is True
    assert by_path["c.yaml"]["kinds"] == ["ConfigMap"]
