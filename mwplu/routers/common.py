from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

_CODE_STATUS = {
    "not_authenticated": status.HTTP_401_UNAUTHORIZED,
    "download_limit_reached": status.HTTP_403_FORBIDDEN,
    "forbidden": status.HTTP_403_FORBIDDEN,
}


def respond(result: dict[str, Any]) -> Any:
    """Return a service envelope, with a 4xx status when it reports a failure."""
    if result.get("success"):
        return result
    status_code = _CODE_STATUS.get(result.get("code") or "", status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content=result)
