"""
Client Portal Web API endpoint definitions.

Documentation: https://www.interactivebrokers.com/api/doc.html
"""

# Session
TICKLE = "/v1/api/tickle"

# Contract lookup
SECDEF_SEARCH = "/v1/api/iserver/secdef/search"
SECDEF_INFO = "/v1/api/iserver/secdef/info"

# Market Data
MARKETDATA_SNAPSHOT = "/v1/api/iserver/marketdata/snapshot"
