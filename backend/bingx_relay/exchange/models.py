"""
BingX client Pydantic schemas.

ClientConfig is the immutable credential and endpoint bundle injected into
BingXClient. ExchangeResponse is the normalized envelope returned for every
call; its success flag is derived from the presence of a data field because
BingX reports partial failures with inconsistent codes across endpoints.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://open-api.bingx.com"
DEFAULT_TIMEOUT_SECONDS = 5.0


class ClientConfig(BaseModel):
    """
    Schema for BingX client configuration.

    Attributes:
        api_key: API key sent in the X-BX-APIKEY header
        api_secret: Secret used to HMAC-sign private requests
        base_url: REST API host
        timeout: Per-request timeout in seconds
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", repr=False)
    api_secret: str = Field(default="", repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS


class ExchangeResponse(BaseModel):
    """
    Schema for a normalized BingX response.

    Attributes:
        code: BingX status code, or -1 when the body could not be interpreted
        msg: BingX message, empty when absent
        data: Response payload; large integers keep full precision
        success: True iff the response carried a data field
    """

    model_config = ConfigDict(frozen=True)

    code: int
    msg: str = ""
    data: Any = None
    success: bool
