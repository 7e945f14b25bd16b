"""Moneybox: personal finance tracking."""

__version__ = "0.1.0"


# The CLI pulls in the whole stack, so load it only when asked for
def __getattr__(name):
    if name == "main":
        from moneybox.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
