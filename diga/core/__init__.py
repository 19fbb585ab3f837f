"""Konfiguration und Logging für den DiGA-Writer."""
