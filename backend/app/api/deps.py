"""Shared route dependencies. Authentication is upstream; the acting user arrives as a header."""
from fastapi import Header, HTTPException, Query

from app.core.constants import USER_ID_HEADER


def current_user_id(
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
    user_id: str | None = Query(None),
) -> str:
    uid = (x_user_id or user_id or "").strip()
    if not uid:
        raise HTTPException(status_code=401, detail=f"{USER_ID_HEADER} header is required")
    return uid
