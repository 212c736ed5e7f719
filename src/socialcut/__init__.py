"""socialcut - split and compose videos into platform-ready encodes."""

__version__ = "0.1.0"
