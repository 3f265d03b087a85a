"""Power Monitor: live power and temperature telemetry dashboard."""

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("power-monitor")
except Exception:
    __version__ = "dev"
