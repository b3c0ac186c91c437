from conftest import employee
from employee_imports.services.validation import validate_employee, validate_file_import, validate_rows


def test_salary_string_keeps_digits_only():
    emp, errors = validate_employee(employee(salaire="45 000€"))
    assert errors == {}
    assert emp.salaire == 45000


def test_salary_without_digits_fails_positive_rule():
    emp, errors = validate_employee(employee(salaire="abc"))
    assert emp is None
    assert errors == {"salaire": "Salaire doit être supérieur à zéro"}


def test_salary_fraction_is_rejected():
    _, errors = validate_employee(employee(salaire=1500.5))
    assert errors == {"salaire": "Salaire doit être un entier"}


def test_field_messages():
    _, errors = validate_employee({"nom": " ", "email": "nope", "salaire": 0})
    assert errors == {
        "nom": "Nom requis",
        "email": "Email invalide",
        "poste": "Poste requis",
        "salaire": "Salaire doit être supérieur à zéro",
    }


def test_collection_errors_are_reported_per_index():
    raw = {
        "fileName": "staff.xlsx",
        "employees": [
            employee(email="bad"),
            employee(nom="Bob", email="bob@example.com"),
            employee(nom="", salaire="abc"),
        ],
    }
    data, errors = validate_file_import(raw)
    assert data is None
    assert set(errors["employees"]) == {"0", "2"}
    assert errors["employees"]["0"] == {"email": "Email invalide"}
    assert errors["employees"]["2"] == {"nom": "Nom requis", "salaire": "Salaire doit être supérieur à zéro"}


def test_empty_collection_is_valid():
    data, errors = validate_file_import({"fileName": "empty.xlsx", "importedAt": "2025-06-01T10:00:00Z", "employees": []})
    assert errors == {}
    assert data.employees == []


def test_parent_fields():
    _, errors = validate_file_import({"fileName": "", "importedAt": "", "employees": []}, update=True)
    assert errors == {"fileName": "Nom de fichier requis", "importedAt": "Date d'import requise"}

    _, errors = validate_file_import({"fileName": "a.xlsx", "employees": []}, update=True)
    assert errors == {"importedAt": "Date d'import requise"}


def test_unknown_fields_are_rejected():
    _, errors = validate_file_import({"fileName": "a.xlsx", "owner": "x", "employees": [employee(bonus=3)]})
    assert errors["owner"] == "Champ inconnu"
    assert errors["employees"]["0"] == {"bonus": "Champ inconnu"}


def test_file_import_id_echo_is_accepted():
    data, errors = validate_file_import({"fileName": "a.xlsx", "employees": [employee(id=4, fileImportId=9)]})
    assert errors == {}
    assert data.employees[0].id == 4


def test_duplicate_ids_are_rejected():
    _, errors = validate_file_import(
        {"fileName": "a.xlsx", "employees": [employee(id=1), employee(id=2), employee(id=1)]}
    )
    assert errors == {"employees": {"0": {"id": "Identifiant en double"}, "2": {"id": "Identifiant en double"}}}


def test_validate_rows_collects_every_failure():
    employees, errors = validate_rows([employee(salaire="0"), employee(), employee(email="")])
    assert len(employees) == 1
    assert set(errors) == {"0", "2"}


def test_duplicate_ids_reported_with_field_errors():
    _, errors = validate_file_import(
        {"fileName": "a.xlsx", "employees": [employee(id=1), employee(id=1), employee(email="bad")]}
    )
    assert errors == {
        "employees": {
            "0": {"id": "Identifiant en double"},
            "1": {"id": "Identifiant en double"},
            "2": {"email": "Email invalide"},
        }
    }


def test_duplicate_id_on_an_invalid_row_keeps_both_messages():
    _, errors = validate_file_import(
        {"fileName": "a.xlsx", "employees": [employee(id=7, salaire="abc"), employee(id=7)]}
    )
    assert errors["employees"]["0"] == {
        "salaire": "Salaire doit être supérieur à zéro",
        "id": "Identifiant en double",
    }
    assert errors["employees"]["1"] == {"id": "Identifiant en double"}


def test_employee_id_beyond_integer_column_is_rejected():
    _, errors = validate_file_import({"fileName": "a.xlsx", "employees": [employee(id=2**31)]})
    assert set(errors["employees"]["0"]) == {"id"}
