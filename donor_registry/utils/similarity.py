"""
Compatibility utilities for the Donor Registry package.
"""

import time
import logging

from .records import GENE_COUNT, iter_persons

logger = logging.getLogger('donor_registry.similarity')


def count_gene_matches(donor, patient):
    """
    Count the gene slots in which donor and patient carry the same value.

    Slot i of the donor is compared only with slot i of the patient, by exact
    string equality.

    Parameters:
    -----------
    donor : Person
        Donor record
    patient : Person
        Patient profile

    Returns:
    --------
    int
        Number of matching slots (0-5)
    """
    match_count = 0
    for i in range(GENE_COUNT):
        if donor.genes[i] == patient.genes[i]:
            match_count += 1
    return match_count


def count_mismatches(donor_gene, patient_gene):
    """
    Count character positions where two gene strings differ.

    Only positions within ``donor_gene`` are visited. If ``patient_gene`` is
    shorter, the donor's trailing characters are never compared; if it is
    longer, its extra characters are ignored. The result therefore depends on
    argument order when the lengths differ.

    Parameters:
    -----------
    donor_gene : str
        Gene sequence driving the comparison
    patient_gene : str
        Gene sequence compared against it

    Returns:
    --------
    int
        Number of differing positions
    """
    mismatches = 0
    for donor_char, patient_char in zip(donor_gene, patient_gene):
        if donor_char != patient_char:
            mismatches += 1
    return mismatches


def get_potential_donors(database, patient, min_match):
    """
    Scan a registry for donors compatible with a patient.

    Parameters:
    -----------
    database : str or Path
        Path of the unified registry
    patient : Person
        Patient profile; only its genes are used
    min_match : int
        Minimum number of matching gene slots

    Returns:
    --------
    tuple
        (list of qualifying donors in registry order, number of donors)
    """
    start_time = time.time()
    try:
        db_file = open(database, 'r', encoding='utf-8', errors='replace')
    except OSError as e:
        logger.error(f"Error opening database file {database}: {e}")
        raise

    donors = []
    scanned = 0
    with db_file:
        for person in iter_persons(db_file):
            scanned += 1
            if count_gene_matches(person, patient) >= min_match:
                donors.append(person)

    logger.info(f"Scanned {scanned} donors in {time.time() - start_time:.2f} seconds")
    logger.info(f"Found {len(donors)} potential donors with at least {min_match} matching genes")

    return donors, len(donors)
