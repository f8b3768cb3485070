import pandas as pd
import pytest
from donor_registry import DonorRegistry
from donor_registry.utils.io import (
    close_unit_files,
    format_donor_list,
    load_registry,
    open_unit_files,
    save_results,
)
from donor_registry.utils.records import Person

DONORS = [
    Person("Alice Brown", "100000001", ("A1", "B2", "C3", "D4", "E5")),
    Person("Bob Clark", "100000002", ("A1", "B2", "X", "D4", "E5")),
]


def test_open_unit_files_uses_numbered_names(make_unit_files):
    root = make_unit_files("first", "second", "third")
    unit_files = open_unit_files(root, 3)
    try:
        assert [f.read() for f in unit_files] == ["first", "second", "third"]
    finally:
        close_unit_files(unit_files)
    assert all(f.closed for f in unit_files)


def test_open_unit_files_missing_unit_is_fatal(make_unit_files):
    root = make_unit_files("first")
    with pytest.raises(FileNotFoundError):
        open_unit_files(root, 2)


def test_load_registry(tmp_path, donors_text):
    database = tmp_path / "registry.txt"
    database.write_text(donors_text)
    registry_df = load_registry(database)
    assert list(registry_df.columns) == ["name", "id", "gene_1", "gene_2", "gene_3", "gene_4", "gene_5"]
    assert registry_df["id"].tolist() == ["100000001", "100000002", "100000003", "100000004"]
    assert registry_df.loc[1, "gene_3"] == "X"


def test_save_results_csv(tmp_path, patient):
    path = save_results(DONORS, patient, tmp_path / "donors.csv")
    df = pd.read_csv(path, dtype={"donor_id": str})
    assert df["donor_id"].tolist() == ["100000001", "100000002"]
    assert df["match_count"].tolist() == [5, 4]
    assert df["gene_3_match"].tolist() == [True, False]


def test_save_results_parquet(tmp_path, patient):
    path = save_results(DONORS, patient, tmp_path / "donors.parquet")
    df = pd.read_parquet(path)
    assert df["donor_name"].tolist() == ["Alice Brown", "Bob Clark"]
    assert df["match_count"].tolist() == [5, 4]


def test_save_results_nothing_to_export(tmp_path, patient):
    assert save_results([], patient, tmp_path / "donors.csv") is None
    assert not (tmp_path / "donors.csv").exists()


def test_format_donor_list():
    report = format_donor_list(DONORS)
    lines = report.splitlines()
    assert lines[0] == "Potential Donors Details"
    assert lines[2] == "1. " + "Alice Brown".ljust(30) + " 100000001"
    assert lines[3] == "2. " + "Bob Clark".ljust(30) + " 100000002"
    assert format_donor_list([]) == "No potential donors found."


def test_open_unit_files_replaces_undecodable_bytes(tmp_path):
    (tmp_path / "unit1.txt").write_bytes(
        b"Ann Lee 1 A1 B2 C3 D4 E5\nJos\xe9 Diaz 2 A1 B2 C3 D4 E5\n"
    )
    (tmp_path / "unit2.txt").write_bytes(b"Bob Ray 3 A1 B2 C3 D4 E5\n")
    database = tmp_path / "registry.txt"

    registry = DonorRegistry(database=str(database))
    summary = registry.unify_units(str(tmp_path / "unit"), 2)

    assert summary["records_written"] == 3
    names = load_registry(database)["name"].tolist()
    assert names == ["Ann Lee", "Bob Ray", "Jos\ufffd Diaz"]


def test_bad_bytes_after_malformed_record_are_ignored(tmp_path):
    (tmp_path / "unit1.txt").write_bytes(
        b"Ann Lee 1 A1 B2 C3 D4 E5\nbroken\n\xff\xfe trailing\n"
    )
    database = tmp_path / "registry.txt"

    summary = DonorRegistry(database=str(database)).unify_units(str(tmp_path / "unit"), 1)

    assert summary["records_written"] == 1
    assert summary["records_per_unit"] == [1]
