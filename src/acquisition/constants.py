"""Constants for the acquisition pipeline."""

# Days per month, indexed by month number. February is fixed at 29 so that
# Feb 29 is always accepted, whatever the year.
DAYS_IN_MONTH = (0, 31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

MIN_MONTH = 1
MAX_MONTH = 12
MIN_DAY = 1
MAX_DAY = 31

COMPONENT_ACQUISITION = "acquisition"
