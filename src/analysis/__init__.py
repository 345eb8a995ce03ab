"""Event findings subsystem."""
from .exceptions import FindingsError
from .occurrence import OccurrenceEntry, OccurrenceTable, sort_entries
from .findings import Findings, TRACKED_KEYS
