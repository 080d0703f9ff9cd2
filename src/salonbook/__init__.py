"""Salon booking: professionals, work hours, appointments and ledger."""

__version__ = "0.1.0"


# The CLI pulls in every command module, so only load it when asked for
def __getattr__(name):
    if name == "main":
        from salonbook.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
