"""
Deterministic import/export rules.

Header spellings, sentinels and defaults live here so the engine modules
never hard-code them. They are folded into ``config.DEFAULT_CONFIG``.
"""

from datetime import datetime

TARGET_ENCODING = "utf-8-sig"  # UTF-8 with BOM
DELIMITER = ","
MAX_SCAN_LINES = 20

HEADER_TERMINI = "#TERMINI"
HEADER_CONTENT = "#DOCUMENTS/ACCIONS"
HEADER_DUE_DATE = "#DATA A FER"

HEADER_VARIANTS_TERMINI = (HEADER_TERMINI, "TERMINI")
HEADER_VARIANTS_CONTENT = (
    HEADER_CONTENT,
    "DOCUMENTS/ACCIONS",
    "#DOCUMENT/ACCIONS",
    "DOCUMENT/ACCIONS",
    "DOCUMENT",
)
HEADER_VARIANTS_DUE_DATE = (HEADER_DUE_DATE, "DATA A FER")

NOT_SPECIFIED = "Data no especificada"
UNKNOWN_DATE = "Data Desconeguda"
NOT_APPLICABLE = "N/A"
SPREADSHEET_ERROR = "#VALUE!"

# Never handed to the date parser; compared case-insensitively.
DATE_SENTINELS = (
    SPREADSHEET_ERROR,
    "-",
    "",
    NOT_SPECIFIED,
    UNKNOWN_DATE,
    NOT_APPLICABLE,
    "Not specified",
    "Unknown",
    "Not applicable",
)

# Windows spreadsheet epoch (serial 1 == 1900-01-01 once the 1900 leap bug is absorbed)
SPREADSHEET_EPOCH = datetime(1899, 12, 30)

INITIAL_POSTIT_COLOR = "#E9F5E8"
POSTIT_COLOR_PALETTE = (
    ("Green", INITIAL_POSTIT_COLOR),
    ("Yellow", "#FFFACD"),
    ("Blue", "#ADD8E6"),
    ("Pink", "#FFB6C1"),
    ("Orange", "#FFDAB9"),
    ("Purple", "#E6E6FA"),
)

DEFAULT_TASK_STATUS = "Pendent"
