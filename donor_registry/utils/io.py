"""
Input/Output utilities for the Donor Registry package.
"""

import logging
import pandas as pd
from pathlib import Path

from .records import GENE_COUNT, NAME_WIDTH, iter_persons
from .similarity import count_gene_matches

logger = logging.getLogger('donor_registry.io')

GENE_COLUMNS = [f'gene_{i + 1}' for i in range(GENE_COUNT)]


def open_unit_files(root_name, number_of_units):
    """
    Open the unit files ``<root_name>1.txt`` .. ``<root_name><n>.txt``.

    Parameters:
    -----------
    root_name : str
        Common prefix of the unit file names (may include a directory)
    number_of_units : int
        Number of units to open

    Returns:
    --------
    list
        Open text streams in unit order; close them with close_unit_files()
    """
    unit_files = []
    for i in range(1, number_of_units + 1):
        file_name = f"{root_name}{i}.txt"
        try:
            unit_files.append(open(file_name, 'r', encoding='utf-8', errors='replace'))
        except OSError:
            logger.error(f"Could not open unit file {file_name}")
            close_unit_files(unit_files)
            raise
    logger.info(f"Opened {len(unit_files)} unit files with root name {root_name}")
    return unit_files


def close_unit_files(unit_files):
    for unit_file in unit_files:
        unit_file.close()


def load_registry(database):
    """
    Load every parseable record of a registry into a DataFrame.

    Parameters:
    -----------
    database : str or Path
        Path of the unified registry

    Returns:
    --------
    pandas.DataFrame
        One row per record with columns name, id, gene_1 .. gene_5
    """
    logger.info(f"Loading registry from {database}")
    with open(database, 'r', encoding='utf-8', errors='replace') as db_file:
        rows = [
            dict(name=person.name, id=person.id, **dict(zip(GENE_COLUMNS, person.genes)))
            for person in iter_persons(db_file)
        ]
    registry_df = pd.DataFrame(rows, columns=['name', 'id'] + GENE_COLUMNS)
    logger.info(f"Registry shape: {registry_df.shape}")
    return registry_df


def save_results(potential_donors, patient, output_path):
    """
    Export potential donors to CSV, or Parquet when the path ends in .parquet.

    Parameters:
    -----------
    potential_donors : list
        Donor records returned by the matcher
    patient : Person
        Patient profile the donors were matched against
    output_path : str or Path
        Path to save the output file

    Returns:
    --------
    str
        Path to the saved file
    """
    if not potential_donors:
        logger.warning("No potential donors to export")
        return None

    export_records = []
    for donor in potential_donors:
        record = {
            'donor_name': donor.name,
            'donor_id': donor.id,
            'match_count': count_gene_matches(donor, patient)
        }
        for column, donor_gene, patient_gene in zip(GENE_COLUMNS, donor.genes, patient.genes):
            record[column] = donor_gene
            record[f'{column}_match'] = donor_gene == patient_gene
        export_records.append(record)

    df_export = pd.DataFrame(export_records)

    output_path = Path(output_path)
    if output_path.suffix == '.parquet':
        df_export.to_parquet(output_path, index=False)
    else:
        df_export.to_csv(output_path, index=False)
    logger.info(f"Exported {len(df_export)} potential donors to {output_path}")

    return str(output_path)


def format_donor_list(potential_donors):
    """
    Render the numbered list of potential donors for display.

    Returns:
    --------
    str
        Report text, one donor per line
    """
    if not potential_donors:
        return "No potential donors found."

    lines = ["Potential Donors Details", "------------------------"]
    for i, donor in enumerate(potential_donors, start=1):
        lines.append(f"{i}. {donor.name:<{NAME_WIDTH}} {donor.id}")
    return "\n".join(lines)
