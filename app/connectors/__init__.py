"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.sheets_connector import SheetsConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "SheetsConnector",
]
