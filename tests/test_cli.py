import json

import pytest
from ruamel.yaml import YAML

from kubefill.cli.main import KubeFillCLI

DAEMONSET = """\
apiVersion: apps/v1
kind: DaemonSet
metadata:
  name: cloud-node-manager
spec:
  template:
    spec:
      containers:
      - name: cloud-node-manager
        image: placeholder
        env:
        - name: OCP_INFRASTRUCTURE_NAME
          value: kubernetes
"""


@pytest.fixture
def setup(tmp_path):
    manifests = tmp_path / "manifests"
    manifests.mkdir()
    (manifests / "cnm.yaml").write_text(DAEMONSET, encoding="utf-8")
    config = tmp_path / "config.yaml"
    config.write_text("managedNamespace: ccm-ns\ninfrastructureName: infra-1\n", encoding="utf-8")
    images = tmp_path / "images.json"
    images.write_text(json.dumps({"cloudNodeManager": "cnm:1.0"}), encoding="utf-8")
    return manifests, config, images


def test_render_preview_leaves_files(setup):
    manifests, config, images = setup
    code = KubeFillCLI().run(["render", str(manifests), "--config", str(config), "--images", str(images), "--diff"])

    assert code == 0
    assert (manifests / "cnm.yaml").read_text(encoding="utf-8") == DAEMONSET


def test_render_write_single_file(setup):
    manifests, config, images = setup
    code = KubeFillCLI().run(["render", str(manifests / "cnm.yaml"), "-c", str(config),
                              "--images", str(images), "--write"])

    assert code == 0
    doc = YAML(typ="safe").load((manifests / "cnm.yaml").read_text(encoding="utf-8"))
    container = doc["spec"]["template"]["spec"]["containers"][0]
    assert doc["metadata"]["namespace"] == "ccm-ns"
    assert container["image"] == "cnm:1.0"
    assert container["env"][0]["value"] == "infra-1"


def test_render_reports_failed_file(setup):
    manifests, config, _ = setup
    (manifests / "broken.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")

    assert KubeFillCLI().run(["render", str(manifests), "-c", str(config)]) == 1


def test_render_missing_path(setup, tmp_path):
    _, config, _ = setup
    assert KubeFillCLI().run(["render", str(tmp_path / "missing"), "-c", str(config)]) == 1


def test_config_error_exit_code(setup, tmp_path):
    manifests, _, _ = setup
    bad = tmp_path / "bad.yaml"
    bad.write_text("controllerImage: x\n", encoding="utf-8")

    assert KubeFillCLI().run(["render", str(manifests), "-c", str(bad)]) == 1


def test_show_config(setup, capsys):
    _, config, images = setup
    assert KubeFillCLI().run(["show-config", "-c", str(config), "--images", str(images)]) == 0
    out = capsys.readouterr().out
    assert "ccm-ns" in out
    assert "cnm:1.0" in out


def test_no_command_prints_help(capsys):
    assert KubeFillCLI().run([]) == 0
    assert "kubefill" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [
    ["render", "PATH", "-c", "CFG", "-v"],
    ["-v", "render", "PATH", "-c", "CFG"],
    ["show-config", "-c", "CFG", "--verbose"],
])
def test_verbose_flag_accepted_anywhere(argv):
    args = KubeFillCLI().parser.parse_args(argv)
    assert args.verbose is True


def test_verbose_defaults_off():
    assert KubeFillCLI().parser.parse_args(["show-config", "-c", "CFG"]).verbose is False


def test_render_with_trailing_verbose(setup):
    manifests, config, _ = setup
    assert KubeFillCLI().run(["render", str(manifests / "cnm.yaml"), "-c", str(config), "-v"]) == 0


def test_config_directory_is_config_error(setup, tmp_path):
    manifests, _, _ = setup
    assert KubeFillCLI().run(["render", str(manifests), "-c", str(tmp_path)]) == 1
