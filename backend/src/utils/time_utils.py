from datetime import datetime
from pytz import utc

def get_current_time() -> datetime:
    """Get current time as an aware UTC datetime."""
    return datetime.now(utc)

def get_utc_now() -> datetime:
    """Get current UTC time without tzinfo (the form stored in the database)."""
    return get_current_time().replace(tzinfo=None)
