"""superhat: 40 cockpit switches from a single 4-way hat."""

__version__ = "0.1.0"
