"""
datforge - ROM/DAT metadata converter

Reads ROM cataloging DAT files in their many textual dialects (ClrMamePro,
DosCenter, MAME listrom, AttractMode, Everdrive SMDB, CSV/TSV/SSV,
hashfiles, RomCenter, Logiqx XML), normalizes them into one canonical tree
and writes any dialect back out.
"""

__version__ = "0.3.0"
__author__ = "datforge contributors"
