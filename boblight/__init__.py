"""Building blocks for ambient light software: color processing, message queues, timers, threads, TCP and serial I/O, logging."""

__version__ = "0.1.0"