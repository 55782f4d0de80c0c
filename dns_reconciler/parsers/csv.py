import csv
import logging
from typing import Any, Dict, List

from ..core.records import DnsRecord, RecordTarget, record_from_dict
from ..utils.validators import RecordValidationError, expected_to_record

logger = logging.getLogger(__name__)

# CSV header (case-insensitive) -> record key
COLUMNS = {
    "name": "name",
    "type": "type",
    "value": "value",
    "ttl": "ttl",
    "address": "address",
    "cname": "cname",
    "exchange": "exchange",
    "preference": "preference",
    "priority": "priority",
    "weight": "weight",
    "port": "port",
    "target": "target",
    "service": "service",
    "protocol": "protocol",
}
NUMERIC_COLUMNS = {"ttl", "preference", "priority", "weight", "port"}
# Expected A/AAAA/CNAME rows may carry their target in the Value column
VALUE_SHORTHAND = {"A": "address", "AAAA": "address", "CNAME": "cname"}


class CSVParser:
    """Reads DNS records from a CSV file with at least Name and Type columns."""

    def __init__(self, csv_path: str):
        self.csv_path = csv_path

    def parse(self) -> List[Dict[str, Any]]:
        """Parse CSV file into raw record mappings."""
        rows = []

        try:
            with open(self.csv_path, "r", newline="") as f:
                reader = csv.DictReader(f)
                headers = {h.strip().lower(): h for h in (reader.fieldnames or [])}

                if "name" not in headers or "type" not in headers:
                    raise ValueError("CSV must contain 'Name' and 'Type' columns")

                for row in reader:
                    raw: Dict[str, Any] = {}
                    for column, key in COLUMNS.items():
                        if column not in headers:
                            continue
                        cell = (row.get(headers[column]) or "").strip()
                        if cell == "":
                            continue
                        if key in NUMERIC_COLUMNS and cell.isdigit():
                            raw[key] = int(cell)
                        else:
                            raw[key] = cell
                    rows.append(raw)

            logger.info(f"Successfully parsed {len(rows)} records from CSV")

        except FileNotFoundError:
            raise FileNotFoundError(f"CSV file not found: {self.csv_path}")

        return rows

    def parse_records(self) -> List[DnsRecord]:
        """Records to write; MX/SRV may use a free-text Value column."""
        return [record_from_dict(raw) for raw in self.parse()]

    def parse_expected(self) -> List[DnsRecord]:
        """Expected records, validated against their type's required fields."""
        records = []
        for row_num, raw in enumerate(self.parse(), start=2):
            shorthand = VALUE_SHORTHAND.get(str(raw.get("type", "")).upper())
            if shorthand and shorthand not in raw and "value" in raw:
                raw[shorthand] = raw.pop("value")
            try:
                records.append(expected_to_record(raw))
            except RecordValidationError as e:
                raise RecordValidationError(f"Row {row_num}: {e}")
        return records


def parse_targets(specs: List[str]) -> List[RecordTarget]:
    """Turn ``name:type`` strings into delete targets."""
    targets = []
    for spec in specs:
        name, sep, record_type = spec.rpartition(":")
        if not sep or not name or not record_type:
            raise ValueError(f"Invalid target '{spec}', expected name:type")
        targets.append(RecordTarget(name=name, type=record_type.upper()))
    return targets
