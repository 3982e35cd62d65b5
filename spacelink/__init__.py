"""Building blocks of a small-satellite packet protocol: checksums, authentication, queues, buffers and connections."""

__version__ = "0.1.0"