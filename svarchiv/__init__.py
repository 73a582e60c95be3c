"""
SV-Archiv: schedule engine, protocol archive and helpers for the SV website.
"""
