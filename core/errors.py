"""
FTL Calculation Errors
======================

ConfigurationUnavailable is the only error that stops a batch.
LimitNotFound is recovered per duty cycle by the limit resolver.
"""


class FTLError(Exception):
    """Base class for FTL calculation errors"""


class ConfigurationUnavailable(FTLError):
    """Limit tables / aircraft groups / stations could not be loaded"""

    def __init__(self, message: str, source: str = None):
        super().__init__(message)
        self.source = source


class LimitNotFound(FTLError):
    """No limit table entry for the requested keys"""

    def __init__(self, crew_type: str, acclimatization: str, table_key: str,
                 detail: str = None):
        message = f"No limit table found for {crew_type}, {acclimatization}, {table_key}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.crew_type = crew_type
        self.acclimatization = acclimatization
        self.table_key = table_key
        self.detail = detail
