"""
Record utilities for the Donor Registry package.

Parsing and formatting of the fixed-width donor records shared by the unit
files and the unified registry.
"""

import logging
from collections import namedtuple

logger = logging.getLogger('donor_registry.records')

NAME_WIDTH = 30
ID_WIDTH = 9
GENE_WIDTH = 21
GENE_COUNT = 5

DIGITS = '0123456789'
# ASCII whitespace only; \xa0 and other Unicode spaces are name characters
WHITESPACE = ' \t\n\v\f\r'

# One entity serves as both donor and patient
Person = namedtuple('Person', ['name', 'id', 'genes'])


def clean_name(name):
    """
    Trim a raw name token to its canonical form.

    Everything from the first digit on is dropped, as are the blanks that
    precede it. Leading whitespace is left alone.

    Parameters:
    -----------
    name : str
        Raw name token

    Returns:
    --------
    str
        Normalized name ('' if it has no non-whitespace content)
    """
    last_char_index = -1
    for i, char in enumerate(name):
        if char in DIGITS:
            break
        if char not in WHITESPACE:
            last_char_index = i
    return name[:last_char_index + 1]


def create_patient(genes, name='', patient_id=''):
    """
    Build a patient profile from its five gene values.

    Parameters:
    -----------
    genes : sequence of str
        Exactly five gene/locus values, in slot order
    name : str, optional
        Patient name, not used for matching
    patient_id : str, optional
        Patient identifier, not used for matching

    Returns:
    --------
    Person
        The patient record
    """
    genes = tuple(genes)
    if len(genes) != GENE_COUNT:
        raise ValueError(f"Expected {GENE_COUNT} genes, got {len(genes)}")
    return Person(name=name, id=patient_id, genes=genes)


def _skip_whitespace(text, pos):
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def _read_token(text, pos, width):
    pos = _skip_whitespace(text, pos)
    end = pos
    while end < len(text) and end - pos < width and text[end] not in WHITESPACE:
        end += 1
    return text[pos:end], end


def parse_person(text, pos=0):
    """
    Parse the record starting at ``pos`` in a record stream.

    A record is a name run (characters up to the first digit), an identifier
    token and five gene tokens, each bounded by its field width. Whitespace
    between records, newlines included, is not significant.

    Parameters:
    -----------
    text : str
        Contents of a unit file or registry
    pos : int
        Offset to start parsing from

    Returns:
    --------
    tuple
        (Person or None, offset after the record). None means the record was
        short or malformed.
    """
    pos = _skip_whitespace(text, pos)
    end = pos
    while end < len(text) and end - pos < NAME_WIDTH and text[end] not in DIGITS:
        end += 1
    raw_name = text[pos:end]
    if not raw_name:
        return None, end
    pos = end

    fields = []
    for width in [ID_WIDTH] + [GENE_WIDTH] * GENE_COUNT:
        token, pos = _read_token(text, pos, width)
        if not token:
            return None, pos
        fields.append(token)

    person = Person(name=clean_name(raw_name), id=fields[0], genes=tuple(fields[1:]))
    return person, pos


def _read_text(stream):
    # Undecodable data ends the stream like a malformed record does
    lines = []
    try:
        for line in stream:
            lines.append(line)
    except UnicodeDecodeError as e:
        logger.warning(f"Stopped reading at undecodable data: {e}")
    return ''.join(lines)


def iter_persons(stream):
    """
    Yield records from an open text stream until one fails to parse.

    Parameters:
    -----------
    stream : file-like
        Open text stream, owned by the caller

    Yields:
    -------
    Person
        Parsed records in stream order
    """
    text = _read_text(stream)
    pos = 0
    while True:
        person, pos = parse_person(text, pos)
        if person is None:
            remainder = text[pos:].strip()
            if remainder:
                logger.debug(f"Stopped at malformed record near offset {pos}")
            return
        yield person


def format_person(person):
    """Render a record in the fixed-width registry layout."""
    genes = ' '.join(f"{gene:<{GENE_WIDTH}}" for gene in person.genes)
    return f"{person.name:<{NAME_WIDTH}}{person.id:<{ID_WIDTH}} {genes}"
