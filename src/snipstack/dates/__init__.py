"""SnipStack date resolution."""

from snipstack.dates.models import DateRange, DateResolution
from snipstack.dates.remote import RemoteDateResolver
from snipstack.dates.resolver import DateResolver

__all__ = ["DateRange", "DateResolution", "DateResolver", "RemoteDateResolver"]
