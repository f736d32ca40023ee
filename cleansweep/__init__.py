"""
CleanSweep
==========

Sorts a cluttered folder into category folders.

Features:
- Byte-level metadata sniffing for PDF, Office, JPEG, PNG and text files
- Screenshot detection for images
- Reversible sweeps with a JSON log per run

Everything is read locally; no file content leaves the machine.
"""

__version__ = "0.1.0"
