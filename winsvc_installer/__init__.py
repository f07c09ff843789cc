"""winsvc-installer: install or remove a Windows service through sc.exe."""

__version__ = "0.1.0"
