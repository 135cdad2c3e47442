"""Network access to the sales backend."""
from sales_console.api.client import SalesApiClient, SalesApiError

__all__ = ["SalesApiClient", "SalesApiError"]
