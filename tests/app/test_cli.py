from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from trailpack.domain.reconciliation import composite_key
from trailpack.domain.model import record_from_entry
from trailpack.ui import cli as cli_module
from tests.helpers.records import FakeDeterministicResolver, FakeGenerativeResolver, make_entry

if TYPE_CHECKING:
    from pathlib import Path


def _write_entries(tmp_path: Path) -> Path:
    path = tmp_path / "entries.json"
    path.write_text(
        json.dumps(
            [
                make_entry("1", actionType="Created", display="Created field Region"),
                make_entry("2", display="Changed field Tier"),
                make_entry("3", metadataType="ApexClass", display="Changed class LeadService"),
            ]
        )
    )
    return path


def test_generate_writes_manifest(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    entries = _write_entries(tmp_path)
    output = tmp_path / "package.xml"
    tier_key = composite_key(record_from_entry(make_entry("2", display="Changed field Tier")))
    captured: dict[str, object] = {}

    def fake_deterministic(kind: str) -> FakeDeterministicResolver:
        captured["kind"] = kind
        return FakeDeterministicResolver({"1": "Account.Region__c"})

    def fake_generative(*, enabled: bool) -> FakeGenerativeResolver:
        captured["inference"] = enabled
        return FakeGenerativeResolver({tier_key: "Account.Tier__c"})

    monkeypatch.setattr(cli_module, "build_deterministic_resolver", fake_deterministic)
    monkeypatch.setattr(cli_module, "build_generative_resolver", fake_generative)

    cli_module.main(
        [
            "generate",
            "--input",
            str(entries),
            "--filter",
            "updated",
            "--set",
            "3=LeadService",
            "--resolver",
            "catalog",
            "--output",
            str(output),
        ]
    )

    assert captured == {"kind": "catalog", "inference": True}
    text = output.read_text()
    # Only the Updated view was selected, so record 1 is not part of the manifest.
    assert "Account.Region__c" not in text
    assert "<members>Account.Tier__c</members>" in text
    assert "<members>LeadService</members>" in text
    assert text.endswith("</Package>\n")


def test_generate_with_explicit_selection_and_no_resolve(tmp_path: Path) -> None:
    entries = _write_entries(tmp_path)
    output = tmp_path / "package.xml"

    cli_module.main(
        [
            "generate",
            "--input",
            str(entries),
            "--select",
            "3",
            "--skip-resolve",
            "--output",
            str(output),
        ]
    )

    text = output.read_text()
    assert "<members>Unknown_Member</members>" in text
    assert "<name>ApexClass</name>" in text
    assert "CustomField" not in text


def test_changes_lists_filtered_records(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    entries = _write_entries(tmp_path)

    cli_module.main(["changes", "--input", str(entries), "--filter", "Created"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("1\t2024-05-01 12:00\tCreated\tCustomField")
    assert lines[0].endswith("Needs Resolution")


def test_invalid_edit_exits_with_usage_error(tmp_path: Path) -> None:
    entries = _write_entries(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["generate", "--input", str(entries), "--set", "missing-equals"])

    assert excinfo.value.code == 2


def test_unknown_edit_target_is_fatal(tmp_path: Path) -> None:
    entries = _write_entries(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["generate", "--input", str(entries), "--set", "99=Foo__c", "--skip-resolve"]
        )

    assert excinfo.value.code == 1


def test_missing_input_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["changes", "--input", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1
