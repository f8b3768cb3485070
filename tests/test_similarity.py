import io

import pytest
from donor_registry.utils.merge import create_database
from donor_registry.utils.records import Person, create_patient
from donor_registry.utils.similarity import (
    count_gene_matches,
    count_mismatches,
    get_potential_donors,
)


def test_count_gene_matches_example(patient):
    donor = Person("Bob Clark", "100000002", ("A1", "B2", "X", "D4", "E5"))
    assert count_gene_matches(donor, patient) == 4


def test_count_gene_matches_is_positional(patient):
    shifted = create_patient(["E5", "A1", "B2", "C3", "D4"])
    assert count_gene_matches(shifted, patient) == 0


@pytest.mark.parametrize(
    "genes",
    [
        ["A1", "B2", "C3", "D4", "E5"],
        ["A1", "x", "C3", "y", "z"],
        ["a1", "b2", "c3", "d4", "e5"],
    ],
)
def test_count_gene_matches_symmetric_and_reflexive(patient, genes):
    donor = create_patient(genes)
    assert count_gene_matches(donor, patient) == count_gene_matches(patient, donor)
    assert count_gene_matches(donor, donor) == 5


def test_count_mismatches_same_length():
    assert count_mismatches("ACGT", "ACGT") == 0
    assert count_mismatches("ACGT", "AGGA") == 2


def test_count_mismatches_depends_on_first_argument_length():
    # a longer second gene has its extra characters ignored
    assert count_mismatches("ACG", "ACGTTT") == 0
    # a shorter second gene leaves the first gene's tail uncompared
    assert count_mismatches("ACGTTT", "ACG") == 0
    assert count_mismatches("ACGTTT", "TCG") == 1
    assert count_mismatches("", "ACGT") == 0


@pytest.fixture
def registry_path(tmp_path, donors_text):
    database = tmp_path / "registry.txt"
    create_database([io.StringIO(donors_text)], database)
    return database


@pytest.mark.parametrize(
    "min_match, expected",
    [
        (0, ["Alice Brown", "Bob Clark", "Carl Dunn", "Dana Evans"]),
        (2, ["Alice Brown", "Bob Clark", "Carl Dunn"]),
        (4, ["Alice Brown", "Bob Clark"]),
        (5, ["Alice Brown"]),
        (6, []),
    ],
)
def test_get_potential_donors_threshold(registry_path, patient, min_match, expected):
    donors, size = get_potential_donors(registry_path, patient, min_match)
    assert [d.name for d in donors] == expected
    assert size == len(expected)


def test_get_potential_donors_keeps_registry_order(tmp_path, patient):
    # registry scan order, not score order
    database = tmp_path / "registry.txt"
    database.write_text(
        "Zoe Ward 1 A1 B2 C3 D4 E5\n"
        "Abe Bell 2 A1 B2 C3 Q Q\n"
        "Max Moor 3 A1 B2 C3 D4 Q\n"
    )
    donors, size = get_potential_donors(database, patient, 3)
    assert [d.id for d in donors] == ["1", "2", "3"]
    assert size == 3


def test_get_potential_donors_stops_at_malformed_record(tmp_path, patient):
    database = tmp_path / "registry.txt"
    database.write_text(
        "Ann Lee 1 A1 B2 C3 D4 E5\n"
        "Bad Row 2 A1 B2\n"
    )
    donors, size = get_potential_donors(database, patient, 0)
    assert [d.id for d in donors] == ["1"]


def test_get_potential_donors_missing_registry_is_fatal(tmp_path, patient):
    with pytest.raises(OSError):
        get_potential_donors(tmp_path / "nope.txt", patient, 3)
