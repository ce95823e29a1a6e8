"""Package metadata."""

__app_name__ = "mailwright"
__version__ = "0.1.0"
__description__ = "Email composition and SMTP delivery with a single-build message builder"
__license_type__ = "MIT"
