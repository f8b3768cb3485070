import matplotlib
matplotlib.use("Agg")

import pytest

from donor_registry.utils.records import Person, create_patient


@pytest.fixture
def make_unit_files(tmp_path):
    """
    Write unit files named `<root>1.txt`, `<root>2.txt`, ... into tmp_path
    and return the root name.
    """
    def _make(*unit_texts, root="unit"):
        for i, text in enumerate(unit_texts, start=1):
            (tmp_path / f"{root}{i}.txt").write_text(text)
        return str(tmp_path / root)

    return _make


@pytest.fixture
def patient() -> Person:
    return create_patient(["A1", "B2", "C3", "D4", "E5"], name="Pat Ient", patient_id="900000000")


@pytest.fixture
def donors_text() -> str:
    """A single unit holding donors with 5, 4, 2 and 0 matching genes."""
    return (
        "Alice Brown 100000001 A1 B2 C3 D4 E5\n"
        "Bob Clark 100000002 A1 B2 X D4 E5\n"
        "Carl Dunn 100000003 A1 Q Q Q E5\n"
        "Dana Evans 100000004 Q Q Q Q Q\n"
    )
