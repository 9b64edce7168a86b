"""Time telegrams, UBX packets, configuration storage, payload encoders, send queues and display buffers for a pax counter node."""

__version__ = "0.1.0"