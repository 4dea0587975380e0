"""Delimited-text catalog parser.

Turns the catalog resource (header record + six comma separated fields per
record) into an InitiativeCatalog. Double-quoted fields may contain commas
and newlines. Malformed records are skipped, logged and reported on the
returned catalog, never fatal.
"""

import csv
import io
import logging
from typing import List, Sequence

from virgin_initiatives.domain.initiative.core.entities.catalog import (
    InitiativeCatalog,
    SkippedRow,
)
from virgin_initiatives.domain.initiative.core.entities.initiative import InitiativeRecord

logger = logging.getLogger(__name__)

FIELD_COUNT = 6
BOM = "\ufeff"


def split_links(raw: str) -> List[str]:
    """Split the links field into trimmed, non-blank entries.

    Examples:
        >>> split_links(" https://a.com \\n\\nhttps://b.com")
        ['https://a.com', 'https://b.com']
    """
    return [link.strip() for link in raw.splitlines() if link.strip()]


def _is_blank(fields: Sequence[str]) -> bool:
    return not fields or (len(fields) == 1 and not fields[0].strip())


def _skip(line_number: int, field_count: int, raw: str) -> SkippedRow:
    row = SkippedRow(line_number=line_number, field_count=field_count, raw=raw)
    logger.warning(
        "Skipping malformed catalog row",
        extra={
            "line_number": line_number,
            "field_count": field_count,
            "expected": FIELD_COUNT,
        },
    )
    return row


def parse_catalog(text: str) -> InitiativeCatalog:
    """Parse catalog text.

    Args:
        text: Full catalog resource, header included

    Returns:
        Catalog with the parsed records in file order and every skipped row

    Examples:
        >>> catalog = parse_catalog('h1,h2,h3,h4,h5,h6\\nA,B,C,D,E,"http://x"\\n')
        >>> catalog.records[0].links
        ('http://x',)
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=True)
    records: List[InitiativeRecord] = []
    skipped: List[SkippedRow] = []

    header_seen = False
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            skipped.append(_skip(reader.line_num, 0, str(e)))
            continue

        if not header_seen:
            header_seen = True
            continue

        if _is_blank(fields):
            continue

        if len(fields) < FIELD_COUNT:
            skipped.append(_skip(reader.line_num, len(fields), ",".join(fields)))
            continue

        if len(fields) > FIELD_COUNT:
            logger.debug(
                "Ignoring extra catalog fields",
                extra={"line_number": reader.line_num, "field_count": len(fields)},
            )

        company, initiative, challenge, solution, call_to_action, links = (
            f.strip() for f in fields[:FIELD_COUNT]
        )
        records.append(
            InitiativeRecord(
                company=company,
                initiative=initiative,
                challenge=challenge,
                solution=solution,
                call_to_action=call_to_action,
                links=tuple(split_links(links)),
            )
        )

    logger.info(
        "Catalog parsed",
        extra={"records": len(records), "skipped": len(skipped)},
    )
    return InitiativeCatalog(records=tuple(records), skipped_rows=tuple(skipped))
