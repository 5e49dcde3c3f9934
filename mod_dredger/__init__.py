"""
Mod Dredger - discovery and ingestion pipeline for Sims 4 custom content listings.
"""

VERSION = "0.4.0"
