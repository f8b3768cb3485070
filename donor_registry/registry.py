"""
Donor Registry - Core module

This module contains the main DonorRegistry class responsible for unifying the
donor records of several intake units into one registry and for finding
potential donors for a patient in that registry.
"""

import time
import logging
from pathlib import Path

from .utils.records import create_patient
from .utils.merge import create_database, SEPARATOR_POLICIES
from .utils.similarity import get_potential_donors
from .utils.io import open_unit_files, close_unit_files, save_results, format_donor_list
from .utils.visualization import plot_match_distribution, plot_gene_slot_matches

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger('donor_registry')


class DonorRegistry:
    """
    A class to build a unified donor registry from per-unit files and to
    search it for donors genetically compatible with a patient.
    """

    def __init__(self, database=None, output_dir=None):
        """
        Initialize the registry with the database path.

        Parameters:
        -----------
        database : str, optional
            Path of the unified registry file
        output_dir : str, optional
            Directory to save exported results and visualizations
        """
        self.database = database
        self.output_dir = Path(output_dir) if output_dir else Path.cwd() / "output"

        # Result containers
        self.patient = None
        self.potential_donors = []
        self.last_unification = None

        # Configuration settings
        self.min_match = 3
        self.separator_policy = 'unit_boundary'

        logger.info("Initialized DonorRegistry")
        if database:
            logger.info(f"- Database: {database}")

    def set_database(self, database):
        """
        Set or update the registry file path.

        Parameters:
        -----------
        database : str
            Path of the unified registry file
        """
        self.database = database
        logger.info(f"Updated database path: {database}")

    def set_configuration(self, min_match=None, separator_policy=None):
        """
        Configure unification and matching parameters.

        Parameters:
        -----------
        min_match : int, optional
            Minimum number of matching gene slots for a potential donor
        separator_policy : str, optional
            Registry record separator policy ('unit_boundary', 'per_record')
        """
        if min_match is not None:
            if min_match < 0:
                raise ValueError(f"Invalid minimum match: {min_match}")
            self.min_match = min_match

        if separator_policy is not None:
            if separator_policy not in SEPARATOR_POLICIES:
                raise ValueError(f"Invalid separator policy: {separator_policy}")
            self.separator_policy = separator_policy

        logger.info("Configuration updated:")
        logger.info(f"- Minimum match: {self.min_match}")
        logger.info(f"- Separator policy: {self.separator_policy}")

    def unify(self, units, database=None):
        """
        Merge already-open unit streams into the registry file.

        Parameters:
        -----------
        units : list
            Open text streams in unit order; the caller closes them
        database : str, optional
            Registry path, defaults to the configured one

        Returns:
        --------
        dict
            Summary of the unification pass
        """
        if database is not None:
            self.set_database(database)
        if not self.database:
            logger.error("Database path not set. Use set_database() method first.")
            return None

        self.last_unification = create_database(
            units,
            self.database,
            separator_policy=self.separator_policy
        )
        return self.last_unification

    def unify_units(self, root_name, number_of_units, database=None):
        """
        Open the unit files ``<root_name>1.txt`` .. ``<root_name><n>.txt`` and
        merge them into the registry.

        Returns:
        --------
        dict
            Summary of the unification pass
        """
        unit_files = open_unit_files(root_name, number_of_units)
        try:
            return self.unify(unit_files, database=database)
        finally:
            close_unit_files(unit_files)

    def find_potential_donors(self, patient, min_match=None):
        """
        Scan the registry for donors matching the patient.

        Parameters:
        -----------
        patient : Person or sequence of str
            Patient profile, or just its five genes
        min_match : int, optional
            Threshold for this scan, defaults to the configured one

        Returns:
        --------
        list
            Qualifying donors in registry order
        """
        if not self.database:
            logger.error("Database path not set. Use set_database() method first.")
            return []

        if not hasattr(patient, 'genes'):
            patient = create_patient(patient)
        if min_match is None:
            min_match = self.min_match

        self.patient = patient
        self.potential_donors, _ = get_potential_donors(self.database, patient, min_match)
        return self.potential_donors

    def report(self):
        """Return the printable list of the last scan's potential donors."""
        return format_donor_list(self.potential_donors)

    def export_results(self, filename=None):
        """
        Export the potential donors of the last scan.

        Parameters:
        -----------
        filename : str, optional
            Name of the output file (.csv or .parquet). If None, a
            timestamped CSV filename will be used.

        Returns:
        --------
        str
            Path to the saved file
        """
        if not self.potential_donors:
            logger.warning("No potential donors to export")
            return None

        if filename is None:
            timestamp = time.strftime("%Y%m%d-%H%M%S")
            filename = f"potential_donors_{timestamp}.csv"

        self.output_dir.mkdir(exist_ok=True, parents=True)
        output_path = self.output_dir / filename

        return save_results(self.potential_donors, self.patient, output_path)

    def visualize_results(self):
        """
        Visualize the potential donors of the last scan.

        Returns:
        --------
        dict
            Dictionary with paths to visualization files
        """
        if not self.potential_donors:
            logger.warning("No potential donors to visualize")
            return None

        logger.info("Generating visualizations")

        viz_paths = {}
        viz_paths['match_distribution'] = plot_match_distribution(
            self.potential_donors,
            self.patient,
            self.output_dir,
            min_match=self.min_match
        )
        viz_paths['gene_slot_matches'] = plot_gene_slot_matches(
            self.potential_donors,
            self.patient,
            self.output_dir
        )
        return viz_paths

    def run_pipeline(self, patient, min_match=None, visualize=True):
        """
        Run the complete donor search: match, export and visualize.

        Parameters:
        -----------
        patient : Person or sequence of str
            Patient profile, or just its five genes
        min_match : int, optional
            Threshold for this scan, defaults to the configured one
        visualize : bool
            Whether to generate visualizations

        Returns:
        --------
        dict
            Results dictionary with potential donors and output paths
        """
        start_time = time.time()
        logger.info("Starting donor search pipeline")

        if min_match is not None:
            self.set_configuration(min_match=min_match)

        self.find_potential_donors(patient)
        csv_path = self.export_results()

        viz_paths = None
        if visualize:
            viz_paths = self.visualize_results()

        logger.info(f"Pipeline completed in {time.time() - start_time:.2f} seconds")

        return {
            'potential_donors': self.potential_donors,
            'csv_output': csv_path,
            'visualizations': viz_paths
        }
