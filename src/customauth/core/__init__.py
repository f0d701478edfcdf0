"""Core infrastructure shared by the customauth package: settings, logging, errors."""
