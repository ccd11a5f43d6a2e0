"""
Shared constants for the application layer.
"""

from __future__ import annotations


# Trace flag 1118: uniform extent allocation (KB328551)
TRACE_FLAG_1118 = 1118

# SQL Server 2016 (13.x) allocates uniform extents in tempdb by default
TF1118_DEFAULT_VERSION = 13

# Recommended data file count is one per logical core, capped at 8
MAX_RECOMMENDED_DATA_FILES = 8

# System/boot drive prefix checked by the file location rule
SYSTEM_DRIVE_PREFIX = "C:"

# Rule names (evaluation order)
RULE_TF1118 = "TF 1118 Enabled"
RULE_FILE_COUNT = "File Count"
RULE_FILE_GROWTH = "File Growth in Percent"
RULE_FILE_LOCATION = "File Location"
RULE_FILE_MAXSIZE = "File MaxSize Set"

RULE_ORDER = (
    RULE_TF1118,
    RULE_FILE_COUNT,
    RULE_FILE_GROWTH,
    RULE_FILE_LOCATION,
    RULE_FILE_MAXSIZE,
)

NOTES_TF1118_DEFAULT = (
    "SQL Server 2016 and later enable uniform extent allocation in tempdb by default."
)
NOTES_TF1118 = (
    "KB328551 describes how TF 1118 can benefit performance by reducing "
    "allocation contention in tempdb."
)
NOTES_FILE_COUNT = (
    "Microsoft recommends that the number of tempdb data files is equal to "
    "the number of logical cores up to 8."
)
NOTES_FILE_GROWTH = (
    "Set tempdb file growth to a fixed size rather than a percentage "
    "to keep growth increments predictable."
)
NOTES_FILE_LOCATION = (
    "Do not place tempdb files on the system drive (C:)."
)
NOTES_FILE_MAXSIZE = (
    "Consider leaving tempdb file growth unlimited; a capped file can stop "
    "workloads when tempdb fills."
)
