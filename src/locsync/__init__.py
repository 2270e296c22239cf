"""Remote translation table synchronisation and language session service."""
