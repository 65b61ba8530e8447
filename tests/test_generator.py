"""End-to-end tests for the generation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from actiondocs.config import ActionDocsConfig
from actiondocs.generator import DocGenerator, run_action, run_workflows
from actiondocs.models import ComponentType, ManifestError
from actiondocs.normalizer import parse_action
from actiondocs.writer import ReadmeWriter
from tests._fixtures.manifest_builder import BUILD_ACTION, REUSABLE_WORKFLOW, ManifestBuilder


def test_run_action_writes_readme_into_action_root(manifest_builder: ManifestBuilder) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)

    path = run_action(directory)

    assert path == directory.resolve() / "README.md"
    content = path.read_text(encoding="utf-8")
    assert content.startswith("[//]: # (This file is auto generated from ")
    assert "| `token` | GitHub token | true |  |" in content


def test_run_action_uses_id_named_file_for_other_output_dir(
    manifest_builder: ManifestBuilder, tmp_path: Path
) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)
    out_dir = tmp_path / "docs" / "actions"

    path = run_action(directory, readme_out=out_dir)

    assert path == out_dir.resolve() / "build.md"
    assert path.is_file()
    assert not (directory / "README.md").exists()


def test_run_action_treats_explicit_root_as_default(manifest_builder: ManifestBuilder) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)

    path = run_action(directory, readme_out=directory)

    assert path is not None
    assert path.name == "README.md"


def test_run_action_without_manifest_writes_nothing(tmp_path: Path) -> None:
    assert run_action(tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_run_action_propagates_parse_errors(manifest_builder: ManifestBuilder) -> None:
    directory = manifest_builder.action("broken", "name: [unterminated\n")

    with pytest.raises(yaml.YAMLError):
        run_action(directory)


def test_run_action_is_idempotent(manifest_builder: ManifestBuilder) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)

    first = run_action(directory)
    assert first is not None
    first_content = first.read_bytes()
    second = run_action(directory)

    assert second == first
    assert second.read_bytes() == first_content


def test_run_action_passes_config_to_templates(manifest_builder: ManifestBuilder) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)
    config = ActionDocsConfig(root=manifest_builder.path(), repository="my-org/my-actions", version="v3")

    path = run_action(directory, config=config)

    assert path is not None
    assert "- uses: my-org/my-actions/build@v3" in path.read_text(encoding="utf-8")


def test_run_action_at_repository_root_uses_bare_repository(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.write({"action.yml": BUILD_ACTION})
    config = ActionDocsConfig(root=manifest_builder.path(), repository="my-org/build", version="v1")

    path = run_action(manifest_builder.path(), config=config)

    assert path is not None
    assert "- uses: my-org/build@v1" in path.read_text(encoding="utf-8")


def test_generate_readme_sets_relative_readme_path(manifest_builder: ManifestBuilder, tmp_path: Path) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)
    action = parse_action(directory)
    assert action is not None

    captured = {}

    class RecordingRenderer:
        component_type = ComponentType.ACTION

        def render(self, component, **context):
            captured["component"] = component
            return "rendered\n"

    generator = DocGenerator(directory, ComponentType.ACTION, renderer=RecordingRenderer())  # type: ignore[arg-type]
    path = generator.generate_readme(action, tmp_path / "out")

    assert path == (tmp_path / "out").resolve() / "build.md"
    assert path.read_text(encoding="utf-8") == "rendered\n"
    rendered = captured["component"]
    assert rendered.readme_path == path
    assert rendered.relative_readme_path == "../../out/build.md"
    assert action.readme_path is None


def test_generate_readme_skips_when_output_is_a_file(
    manifest_builder: ManifestBuilder, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)
    action = parse_action(directory)
    assert action is not None
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("keep", encoding="utf-8")

    writer = ReadmeWriter(logger=logging.getLogger("tests.generator"))
    generator = DocGenerator(directory, ComponentType.ACTION, writer=writer)
    with caplog.at_level(logging.ERROR, logger="tests.generator"):
        result = generator.generate_readme(action, blocker)

    assert result is None
    assert blocker.read_text(encoding="utf-8") == "keep"
    assert "found a file" in caplog.text


def test_generate_readme_logs_through_injected_logger(
    manifest_builder: ManifestBuilder, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    directory = manifest_builder.action("build", BUILD_ACTION)
    action = parse_action(directory)
    assert action is not None
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("keep", encoding="utf-8")

    generator = DocGenerator(directory, ComponentType.ACTION, logger=logging.getLogger("tests.generator.injected"))
    with caplog.at_level(logging.DEBUG, logger="tests.generator.injected"):
        result = generator.generate_readme(action, blocker)

    assert result is None
    assert generator.writer.logger is generator.logger
    assert generator.renderer.logger is generator.logger
    assert any(
        record.name == "tests.generator.injected" and "found a file" in record.getMessage()
        for record in caplog.records
    )


def test_generate_readme_rejects_unknown_components(tmp_path: Path) -> None:
    generator = DocGenerator(tmp_path, ComponentType.ACTION)

    with pytest.raises(TypeError):
        generator.generate_readme(object())  # type: ignore[arg-type]


def test_run_workflows_only_processes_prefixed_files(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.workflow("reusable-a.yml", REUSABLE_WORKFLOW)
    manifest_builder.workflow("build.yml", REUSABLE_WORKFLOW)
    workflows_dir = manifest_builder.workflows_dir

    written = run_workflows(workflows_dir)

    assert written == [workflows_dir.resolve() / "reusable-a.md"]
    assert not (workflows_dir / "build.md").exists()
    content = written[0].read_text(encoding="utf-8")
    assert "**Source:** [`reusable-a.yml`](reusable-a.yml)" in content
    assert "| `contents` | write |" in content


def test_run_workflows_writes_to_custom_output_dir(manifest_builder: ManifestBuilder, tmp_path: Path) -> None:
    manifest_builder.workflow("reusable-a.yml", REUSABLE_WORKFLOW)
    manifest_builder.workflow("reusable-b.yaml", REUSABLE_WORKFLOW)
    out_dir = tmp_path / "docs" / "workflows"

    written = run_workflows(manifest_builder.workflows_dir, readme_out=out_dir)

    assert sorted(path.name for path in written) == ["reusable-a.md", "reusable-b.md"]
    content = (out_dir / "reusable-b.md").read_text(encoding="utf-8")
    assert "(../../repo/.github/workflows/reusable-b.yaml)" in content


def test_run_workflows_honours_prefix(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.workflow("shared-deploy.yml", REUSABLE_WORKFLOW)
    manifest_builder.workflow("reusable-a.yml", REUSABLE_WORKFLOW)

    written = run_workflows(manifest_builder.workflows_dir, prefix="shared-")

    assert [path.name for path in written] == ["shared-deploy.md"]


def test_run_workflows_missing_directory_writes_nothing(tmp_path: Path) -> None:
    assert run_workflows(tmp_path / ".github" / "workflows") == []


def test_run_workflows_propagates_manifest_errors(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.workflow("reusable-bad.yml", "jobs:\n  build:\n    permissions:\n      contents: admin\n")

    with pytest.raises(ManifestError):
        run_workflows(manifest_builder.workflows_dir)


def test_run_workflows_uses_template_overrides(manifest_builder: ManifestBuilder, tmp_path: Path) -> None:
    manifest_builder.workflow("reusable-a.yml", REUSABLE_WORKFLOW)
    template_root = tmp_path / "templates"
    template_root.mkdir()
    (template_root / "_readme.j2").write_text(
        "{{ workflow.id }}:{% for entry in each_sorted(workflow.permissions) %} {{ entry.key }}={{ entry.value.value }}{% endfor %}\n",
        encoding="utf-8",
    )

    (path,) = run_workflows(manifest_builder.workflows_dir, template_root=template_root)

    assert path.read_text(encoding="utf-8") == (
        f"[//]: # (This file is auto generated from {template_root}. Do not edit)\n"
        "reusable-a: contents=write packages=write"
    )


def test_run_workflows_continues_after_output_failure(
    manifest_builder: ManifestBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    manifest_builder.workflow("reusable-a.yml", REUSABLE_WORKFLOW)
    manifest_builder.workflow("reusable-b.yml", REUSABLE_WORKFLOW)
    workflows_dir = manifest_builder.workflows_dir
    calls = []
    real_prepare = ReadmeWriter.prepare

    def failing_once(self: ReadmeWriter, directory: Path) -> bool:
        calls.append(directory)
        if len(calls) == 1:
            return False
        return real_prepare(self, directory)

    monkeypatch.setattr(ReadmeWriter, "prepare", failing_once)

    written = run_workflows(workflows_dir)

    assert len(calls) == 2
    assert len(written) == 1
    assert written[0].is_file()
    remaining = {"reusable-a.md", "reusable-b.md"} - {written[0].name}
    assert len(remaining) == 1
    assert not (workflows_dir / remaining.pop()).exists()
