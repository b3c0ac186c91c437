import io
import zipfile

import openpyxl
import pytest

from employee_imports.core.errors import DecodeError
from employee_imports.services.tabular import decode_rows, encode_rows


def _workbook_bytes(*sheets) -> bytes:
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for r in rows:
            ws.append(r)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def test_decode_uses_header_row_and_first_sheet():
    blob = _workbook_bytes(
        ("Feuil1", [["nom", "email", "poste", "salaire"], ["Alice", "alice@example.com", "Dev", 1000]]),
        ("Autre", [["x"], [1]]),
    )
    assert decode_rows(blob) == [{"nom": "Alice", "email": "alice@example.com", "poste": "Dev", "salaire": 1000}]


def test_decode_fills_missing_cells_with_empty_string():
    blob = _workbook_bytes(("Feuil1", [["nom", "email", "salaire"], ["Bob", None, "45 000€"], ["Carol"]]))
    rows = decode_rows(blob)
    assert rows == [
        {"nom": "Bob", "email": "", "salaire": "45 000€"},
        {"nom": "Carol", "email": "", "salaire": ""},
    ]


def test_decode_rejects_garbage():
    with pytest.raises(DecodeError):
        decode_rows(b"this is not a workbook")


def test_encode_header_is_union_of_keys_in_first_seen_order():
    blob = encode_rows([{"a": 1, "b": "x"}, {"a": 2, "c": "y"}], "Feuille")
    wb = openpyxl.load_workbook(io.BytesIO(blob))
    assert wb.sheetnames == ["Feuille"]
    ws = wb.active
    assert [c.value for c in ws[1]] == ["a", "b", "c"]
    assert decode_rows(blob) == [{"a": 1, "b": "x", "c": ""}, {"a": 2, "b": "", "c": "y"}]


def test_encoded_rows_decode_back():
    rows = [
        {"Nom": "Alice", "Email": "alice@example.com", "Salaire": 1000, "Poste": "Dev"},
        {"Nom": "Bob", "Email": "bob@example.com", "Salaire": 2000, "Poste": "Ops"},
    ]
    assert decode_rows(encode_rows(rows, "Employés")) == rows


def _truncate_sheet(blob: bytes) -> bytes:
    src = zipfile.ZipFile(io.BytesIO(blob))
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w") as dst:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = data[: len(data) // 2]
            dst.writestr(item, data)
    return out.getvalue()


def test_decode_rejects_corrupt_sheet_xml():
    blob = _workbook_bytes(("Feuil1", [["nom", "email"]] + [[f"n{i}", f"n{i}@example.com"] for i in range(50)]))
    with pytest.raises(DecodeError):
        decode_rows(_truncate_sheet(blob))


def test_decode_keys_are_raw_header_text():
    blob = _workbook_bytes(("Feuil1", [["nom", None, "poste", "nom"], ["a", "x", "p", "b"]]))
    assert decode_rows(blob) == [{"nom": "a", "": "x", "poste": "p"}]


def test_decode_header_only_sheet():
    assert decode_rows(_workbook_bytes(("Feuil1", [["nom", "email"]]))) == []
