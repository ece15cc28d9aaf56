"""Core building blocks: settings, S3 client and exceptions."""
