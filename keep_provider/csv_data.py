"""Parsing and normalization of mapping rule CSV data."""

import csv
import io

from keep_provider.errors import CSVFieldCountError, CSVParseError

CSVRow = dict[str, str]


def normalize_csv(csv_data: str | None) -> str:
    """Canonical form used to compare configured and stored CSV.

    Trims the whole blob and converts every line ending to ``\\n``.
    ``normalize_csv(normalize_csv(x)) == normalize_csv(x)``.
    """
    if not csv_data:
        return ""
    normalized = csv_data.replace("\r\n", "\n").replace("\r", "\n")
    return normalized.strip()


def csv_equal(left: str | None, right: str | None) -> bool:
    return normalize_csv(left) == normalize_csv(right)


def parse_csv_data(csv_data: str) -> list[CSVRow]:
    """Parse CSV text into rows keyed by header column.

    The first record is the header. Every following record must have exactly
    as many fields as the header; rows are never padded or truncated.
    Header names and cells are trimmed.
    """
    reader = csv.reader(io.StringIO(csv_data, newline=""), strict=True)

    try:
        # Blank records before the header are skipped like any other.
        header = next((record for record in reader if record), None)
        if header is None:
            raise CSVParseError("error reading CSV header: no data")
        header = [name.strip() for name in header]

        rows: list[CSVRow] = []
        for record in reader:
            if not record:
                # blank line
                continue
            if len(record) != len(header):
                raise CSVFieldCountError(reader.line_num, len(header), len(record))
            rows.append({key: value.strip() for key, value in zip(header, record)})
    except csv.Error as e:
        raise CSVParseError(f"error reading CSV records: {e}") from e

    return rows
