"""
Unification utilities for the Donor Registry package.

Merges the per-unit record streams into one registry ordered by name, keeping
only the first record seen for each donor id.
"""

import time
import heapq
import logging

from .records import iter_persons, format_person

logger = logging.getLogger('donor_registry.merge')

SEPARATOR_POLICIES = ['unit_boundary', 'per_record']


class UnitSource:
    """
    Sequential reader over one unit's record stream.

    Once a read fails the source is inactive for good. The stream itself is
    opened and closed by the caller.
    """

    def __init__(self, stream, index):
        self.index = index
        self.active = True
        self.records_read = 0
        self._records = iter_persons(stream)
        self._current = None

    def current(self):
        """Most recently parsed record, or None once the source is exhausted."""
        return self._current

    def advance(self):
        """
        Parse the next record from the stream.

        Returns:
        --------
        Person or None
            The new current record, None if the source is (now) inactive
        """
        if not self.active:
            return None
        try:
            self._current = next(self._records)
        except StopIteration:
            self._current = None
            self.active = False
            logger.debug(f"Unit {self.index + 1} exhausted after {self.records_read} records")
        else:
            self.records_read += 1
        return self._current


class DuplicateTracker:
    """Donor ids already written during one unification pass."""

    def __init__(self):
        self._seen = set()

    def is_duplicate(self, donor_id):
        return donor_id in self._seen

    def add(self, donor_id):
        self._seen.add(donor_id)

    def __len__(self):
        return len(self._seen)


def create_database(units, filename, separator_policy='unit_boundary'):
    """
    Merge the records of several units into a single registry file.

    Records are emitted in name order; when names tie the earlier unit wins.
    A record whose id was already written is dropped.

    With the 'unit_boundary' policy a newline is written when the output
    switches to a different unit, just before that unit's record, and only if
    that record is written at all. A duplicate at a boundary still counts as
    the switch, so no newline appears for it. Records of the same unit are
    concatenated. The 'per_record' policy puts every record on its own line.

    Parameters:
    -----------
    units : list
        Open text streams, one per unit, in unit order
    filename : str or Path
        Path of the registry to create (overwritten if present)
    separator_policy : str
        'unit_boundary' (default) or 'per_record'

    Returns:
    --------
    dict
        Summary of the pass: records written, duplicates suppressed and the
        number of records read from each unit
    """
    if separator_policy not in SEPARATOR_POLICIES:
        raise ValueError(f"Invalid separator policy: {separator_policy}")

    start_time = time.time()
    try:
        out_file = open(filename, 'w', encoding='utf-8')
    except OSError as e:
        logger.error(f"Error creating database file {filename}: {e}")
        raise

    with out_file:
        logger.info(f"Unifying {len(units)} units into {filename}")

        sources = [UnitSource(stream, index) for index, stream in enumerate(units)]

        # One heap entry per live source, so (name, unit index) never ties
        heap = []
        for source in sources:
            person = source.advance()
            if person is not None:
                heapq.heappush(heap, (person.name, source.index))

        tracker = DuplicateTracker()
        last_index = None
        records_written = 0
        duplicates = 0

        while heap:
            _, index = heapq.heappop(heap)
            source = sources[index]
            person = source.current()
            duplicate = tracker.is_duplicate(person.id)

            if separator_policy == 'unit_boundary':
                if index != last_index:
                    if last_index is not None and not duplicate:
                        out_file.write('\n')
                    last_index = index
            elif records_written and not duplicate:
                out_file.write('\n')

            if duplicate:
                duplicates += 1
                logger.debug(f"Skipping duplicate id {person.id} from unit {index + 1}")
            else:
                out_file.write(format_person(person))
                tracker.add(person.id)
                records_written += 1

            person = source.advance()
            if person is not None:
                heapq.heappush(heap, (person.name, index))

    logger.info(f"Wrote {records_written} records to {filename} "
                f"({duplicates} duplicates skipped) in {time.time() - start_time:.2f} seconds")

    return {
        'database': str(filename),
        'records_written': records_written,
        'duplicates_suppressed': duplicates,
        'records_per_unit': [source.records_read for source in sources]
    }
