"""PhantomKit — project fingerprinting and manifest synthesis."""

__version__ = "0.1.0"
