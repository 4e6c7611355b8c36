#!/usr/bin/env python3
"""
KUBEFILL ENGINE - The Renderer
------------------------------
The RenderEngine carries a manifest file through load -> fill -> export.
It keeps the operator config for the whole run, writes results atomically
and turns per-file failures into error reports so a batch never aborts
half-way.

Author: KubeFill Team
Date: 2026-01-16
"""

import os
import time
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Callable

from kubefill.core.config import OperatorConfig
from kubefill.core.errors import KubefillError
from kubefill.core.models import ManifestObject
from kubefill.manifests.exporter import KubeExporter
from kubefill.manifests.loader import load_objects
from kubefill.substitution.substitutor import fill_config_values

logger = logging.getLogger("kubefill.engine")


class RenderEngine:
    """
    Renders operator manifests inside a workspace directory using a
    fixed OperatorConfig.
    """

    def __init__(self, config: OperatorConfig, workspace_path: str = "."):
        self.config = config
        self.workspace = Path(workspace_path).resolve()
        self.exporter = KubeExporter()

    def render_text(self, text: str) -> List[ManifestObject]:
        """Loads manifests from YAML text and fills in config values."""
        return fill_config_values(self.config, load_objects(text))

    def render_file(self, relative_path: str, dry_run: bool = True) -> Dict[str, Any]:
        """
        Renders a single manifest file. With dry_run=False a changed
        result is written back in place.
        """
        full_path = (self.workspace / relative_path).resolve()

        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            raw_text = full_path.read_text(encoding='utf-8-sig')
            objects = self.render_text(raw_text)
            final_yaml = self.exporter.export(objects)
        except (KubefillError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Error processing {relative_path}: {str(e)}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        is_modified = raw_text.strip() != final_yaml.strip()
        logger.info(f"Rendered {len(objects)} object(s) from {relative_path}")

        result = {
            "file_path": str(relative_path),
            "success": True,
            "status": self._derive_status(is_modified, dry_run),
            "kinds": [obj.kind for obj in objects],
            "object_count": len(objects),
            "written": False,
            "original_content": raw_text,
            "rendered_content": final_yaml if is_modified else None,
            "timestamp": time.time()
        }

        if not dry_run and is_modified:
            try:
                self._atomic_write(full_path, final_yaml)
                result["written"] = True
            except IOError as e:
                result["write_error"] = str(e)
                result["success"] = False
                result["status"] = "ENGINE_ERROR"

        return result

    def render_directory(self, extension: str = ".yaml", dry_run: bool = True,
                         progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """
        Renders every file with the given extension under the workspace.
        Symlinks are skipped.
        """
        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        all_files = set()
        for p in patterns:
            all_files.update(f for f in self.workspace.rglob(p) if f.is_file() and not f.is_symlink())

        targets = sorted(all_files)
        reports = []
        for processed, file_path in enumerate(targets, 1):
            rel_path = str(file_path.relative_to(self.workspace))
            reports.append(self.render_file(rel_path, dry_run=dry_run))
            if progress_callback:
                progress_callback(processed, len(targets))

        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not reports:
            return {
                "total_files": 0, "successful": 0, "written_to_disk": 0,
                "objects_rendered": 0, "system_errors": 0
            }

        return {
            "total_files": len(reports),
            "successful": sum(1 for r in reports if r.get('success', False)),
            "written_to_disk": sum(1 for r in reports if r.get('written', False)),
            "objects_rendered": sum(r.get('object_count', 0) for r in reports),
            "system_errors": sum(1 for r in reports if not r.get('success', False)),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S")
        }

    def _derive_status(self, modified: bool, dry: bool) -> str:
        if not modified: return "UNCHANGED"
        if dry: return "PREVIEW"
        return "RENDERED"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_suffix('.kubefill.tmp')
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists(): temp_file.unlink()
            raise IOError(f"Atomic write failed: {str(e)}")

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": status, "error": error,
            "success": False, "written": False, "object_count": 0, "kinds": []
        }
