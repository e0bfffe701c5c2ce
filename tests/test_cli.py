"""Tests for the design-fields command line tool."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from designfields.__main__ import format_collection, main
from designfields.lib.codec import read_collection, write_collection
from designfields.models import DropdownField, FieldCollection, TextField

pytestmark = pytest.mark.usefixtures("project_dir", "restore_logging")


def run(capsys, *argv: str) -> tuple[int, str, str]:
    """Run the CLI and return (exit code, stdout, stderr)."""
    try:
        main(list(argv))
        code = 0
    except SystemExit as e:
        code = e.code or 0
    out, err = capsys.readouterr()
    return code, out, err


def added_id(out: str) -> str:
    assert out.startswith("Added field ")
    return out.split()[-1]


class TestShow:
    """Tests for the show command."""

    def test_missing_document_is_empty(self, capsys) -> None:
        code, out, _ = run(capsys, "show")

        assert code == 0
        assert "No fields added yet." in out

    def test_text_listing(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)

        code, out, _ = run(capsys, "--file", str(doc), "show")

        assert code == 0
        assert "1. Size [dropdown]" in out
        assert "shows: Select Finish" in out
        assert "when (0) Size = 'L'" in out
        assert "Total Fields: 3 | Dropdowns: 3" in out

    def test_json_output(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.yaml", sized_chair)

        _, out, _ = run(capsys, "-f", str(doc), "show", "--format", "json")

        assert [f["label"] for f in json.loads(out)] == ["Size", "Color", "Finish"]

    def test_no_command_prints_help(self, capsys) -> None:
        code, out, _ = run(capsys)

        assert code == 0
        assert "add-condition" in out


class TestMutations:
    """Each mutating command loads, applies and writes back."""

    def test_build_a_document(self, capsys, tmp_path: Path) -> None:
        doc = str(tmp_path / "chair.json")

        _, out, _ = run(capsys, "-f", doc, "add-field", "Color", "--kind", "dropdown")
        color = added_id(out)
        _, out, _ = run(capsys, "-f", doc, "add-field", "Finish", "--kind", "dropdown")
        finish = added_id(out)
        _, out, _ = run(capsys, "-f", doc, "add-field", "Engraving")
        engraving = added_id(out)

        for argv in (
            ("add-option", color, "Red"),
            ("add-option", color, "Blue"),
            ("set-default", color, "Red"),
            ("add-option", finish, "Matte"),
            ("add-condition", finish, color, "Red"),
            ("set-value", engraving, "AB"),
        ):
            code, _, err = run(capsys, "-f", doc, *argv)
            assert code == 0, err

        snapshot = read_collection(doc)
        assert color.startswith("field_color_")
        assert snapshot.get(color) == DropdownField(color, "Color", ("Red", "Blue"), "Red")
        assert snapshot.get(finish).conditions[0].depends_on == color
        assert snapshot.get(engraving) == TextField(engraving, "Engraving", "AB")

    def test_id_prefix_from_settings(self, capsys, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("DESIGNFIELDS_ID_PREFIX", "cde")

        _, out, _ = run(capsys, "-f", str(tmp_path / "f.json"), "add-field", "Size")

        assert added_id(out).startswith("cde_size_")

    def test_default_document_path(self, capsys, project_dir: Path) -> None:
        run(capsys, "add-field", "Size")

        assert len(read_collection(project_dir / "design_fields.json")) == 1

    def test_noop_reports_no_changes(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)
        before = doc.read_text(encoding="utf-8")

        code, out, _ = run(capsys, "-f", str(doc), "remove-field", "missing")

        assert code == 0
        assert "No changes." in out
        assert doc.read_text(encoding="utf-8") == before

    def test_rejected_change_leaves_document(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)
        before = doc.read_text(encoding="utf-8")
        size = sized_chair.ids()[0]

        code, _, err = run(capsys, "-f", str(doc), "remove-option", size, "5")

        assert code == 1
        assert "Error:" in err
        assert doc.read_text(encoding="utf-8") == before

    def test_remove_field_cascades(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)
        size, color, finish = sized_chair.ids()

        run(capsys, "-f", str(doc), "remove-field", size)

        assert [c.depends_on for c in read_collection(doc).get(finish).conditions] == [color]


class TestCheckAndVisible:
    """Tests for the read-only commands."""

    def test_check_valid(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)

        code, out, _ = run(capsys, "-f", str(doc), "check")

        assert code == 0
        assert "Field collection is valid." in out

    def test_check_reports_errors(self, capsys, tmp_path: Path) -> None:
        doc = tmp_path / "broken.json"
        doc.write_text(
            json.dumps([
                {"id": "x", "label": "A", "type": "text"},
                {"id": "x", "label": "B", "type": "text"},
            ]),
            encoding="utf-8",
        )

        code, out, _ = run(capsys, "-f", str(doc), "check")

        assert code == 1
        assert "Duplicate field id" in out

    def test_visible_uses_defaults_then_selections(self, capsys, sized_chair, tmp_path: Path) -> None:
        size, color, finish = sized_chair.ids()
        doc = write_collection(tmp_path / "chair.json", sized_chair)

        _, out, _ = run(capsys, "-f", str(doc), "visible", "--json")
        assert json.loads(out)[finish] is False

        _, out, _ = run(
            capsys, "-f", str(doc), "visible", "--json",
            "--select", f"{size}=L", "--select", f"{color}=Red",
        )
        assert json.loads(out) == {size: True, color: True, finish: True}

    def test_visible_table(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)

        _, out, _ = run(capsys, "-f", str(doc), "visible")

        assert out.splitlines()[2].split() == ["Finish", "hidden"]

    def test_bad_selection_is_usage_error(self, capsys, sized_chair, tmp_path: Path) -> None:
        doc = write_collection(tmp_path / "chair.json", sized_chair)

        code, _, err = run(capsys, "-f", str(doc), "visible", "--select", "oops")

        assert code == 2
        assert "FIELD_ID=VALUE" in err

    def test_missing_document_fails(self, capsys) -> None:
        code, _, err = run(capsys, "visible")

        assert code == 1
        assert "not found" in err


def test_format_collection_text_field() -> None:
    snapshot = FieldCollection((TextField("t", "Engraving"),))

    listing = format_collection(snapshot)

    assert "value: (empty)" in listing
    assert listing.endswith("Total Fields: 1")


def test_module_help() -> None:
    """python -m designfields --help runs as a subprocess."""
    result = subprocess.run(
        [sys.executable, "-m", "designfields", "--help"],
        capture_output=True,
        text=True,
        check=False,
        cwd=Path(__file__).resolve().parents[1],
    )

    assert result.returncode == 0
    assert "design-fields" in result.stdout


class TestDocumentSafety:
    """Failed writes and legacy host documents."""

    def test_unencodable_option_keeps_document(self, capsys, sized_chair, tmp_path: Path) -> None:
        """Invalid UTF-8 in argv arrives as surrogates and must not wipe the file."""
        doc = write_collection(tmp_path / "chair.json", sized_chair)
        before = doc.read_bytes()
        size = sized_chair.ids()[0]

        code, out, err = run(capsys, "-f", str(doc), "add-option", size, "\udcff")

        assert code == 1
        assert "Error:" in err
        assert "Updated" not in out
        assert doc.read_bytes() == before
        assert read_collection(doc) == sized_chair

    def test_edit_document_with_orphaned_condition(self, capsys, tmp_path: Path) -> None:
        doc = tmp_path / "host.json"
        doc.write_text(
            json.dumps([
                {
                    "id": "a",
                    "label": "Finish",
                    "type": "dropdown",
                    "values": ["Matte"],
                    "conditions": [{"fieldId": "gone", "value": "x"}],
                },
            ]),
            encoding="utf-8",
        )

        code, _, err = run(capsys, "-f", str(doc), "add-option", "a", "Gloss")

        assert code == 0, err
        field = read_collection(doc).get("a")
        assert field.options == ("Matte", "Gloss")
        assert field.conditions is None
        assert "fieldId" not in doc.read_text(encoding="utf-8")
