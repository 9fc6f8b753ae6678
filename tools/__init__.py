from .aviation_client import AviationAPIError, AviationReferenceClient
from .eligibility_tools import EligibilityTools, ReferenceDataError
from .retry import RetryPolicy, with_retry

__all__ = [
    "AviationAPIError",
    "AviationReferenceClient",
    "EligibilityTools",
    "ReferenceDataError",
    "RetryPolicy",
    "with_retry",
]
