"""
Visualization utilities for the Donor Registry package.
"""

import time
import logging
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path

from .records import GENE_COUNT
from .similarity import count_gene_matches

logger = logging.getLogger('donor_registry.visualization')


def _prepare_output_dir(output_dir):
    if output_dir:
        output_dir = Path(output_dir)
    else:
        output_dir = Path.cwd() / "output"
    output_dir.mkdir(exist_ok=True, parents=True)
    return output_dir


def plot_match_distribution(potential_donors, patient, output_dir=None, min_match=None):
    """
    Plot how many potential donors reach each match count.

    Parameters:
    -----------
    potential_donors : list
        Donor records returned by the matcher
    patient : Person
        Patient profile the donors were matched against
    output_dir : str or Path, optional
        Directory to save the visualization
    min_match : int, optional
        Threshold used for the scan, drawn as a reference line

    Returns:
    --------
    str
        Path to the saved visualization file
    """
    if not potential_donors:
        logger.warning("No potential donors to visualize")
        return None

    output_dir = _prepare_output_dir(output_dir)

    scores = [count_gene_matches(donor, patient) for donor in potential_donors]
    counts = np.bincount(scores, minlength=GENE_COUNT + 1)

    plt.figure(figsize=(10, 6))
    plt.bar(np.arange(GENE_COUNT + 1), counts, color='skyblue', edgecolor='black')
    if min_match is not None:
        plt.axvline(x=min_match - 0.5, color='red', linestyle='--', label=f'Threshold ({min_match})')
        plt.legend()

    plt.xlabel('Matching Genes')
    plt.ylabel('Number of Donors')
    plt.title('Distribution of Gene Matches for Potential Donors')
    plt.xticks(range(GENE_COUNT + 1))

    plt.grid(axis='y', alpha=0.75)
    plt.tight_layout()

    timestamp = time.strftime('%Y%m%d-%H%M%S')
    hist_path = output_dir / f'match_distribution_{timestamp}.png'
    plt.savefig(hist_path)
    logger.info(f"Saved match distribution to {hist_path}")

    plt.close()
    return str(hist_path)


def plot_gene_slot_matches(potential_donors, patient, output_dir=None):
    """
    Plot, for each gene slot, how many potential donors match the patient.

    Parameters:
    -----------
    potential_donors : list
        Donor records returned by the matcher
    patient : Person
        Patient profile the donors were matched against
    output_dir : str or Path, optional
        Directory to save the visualization

    Returns:
    --------
    str
        Path to the saved visualization file
    """
    if not potential_donors:
        logger.warning("No potential donors to visualize")
        return None

    output_dir = _prepare_output_dir(output_dir)

    slot_matches = np.array([
        [donor_gene == patient_gene for donor_gene, patient_gene in zip(donor.genes, patient.genes)]
        for donor in potential_donors
    ])
    per_slot = slot_matches.sum(axis=0)
    labels = [f'Gene {i + 1}\n{gene}' for i, gene in enumerate(patient.genes)]

    plt.figure(figsize=(10, 6))
    plt.bar(labels, per_slot, color='darkgreen')

    for i, count in enumerate(per_slot):
        plt.text(i, count, int(count), ha='center', va='bottom', fontsize=9)

    plt.ylabel('Number of Matching Donors')
    plt.title(f'Gene Slot Matches Across {len(potential_donors)} Potential Donors')
    plt.ylim(0, len(potential_donors) * 1.15)

    plt.tight_layout()

    timestamp = time.strftime('%Y%m%d-%H%M%S')
    slots_path = output_dir / f'gene_slot_matches_{timestamp}.png'
    plt.savefig(slots_path)
    logger.info(f"Saved gene slot matches to {slots_path}")

    plt.close()
    return str(slots_path)
