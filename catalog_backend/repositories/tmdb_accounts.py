from __future__ import annotations

from typing import Any

from catalog_backend.db.connection import fetch_one


def find_account_session_id(conn: Any, account_id: int) -> str | None:
    row = fetch_one(
        conn,
        "SELECT session_id FROM catalog.tmdb_accounts WHERE account_id = %s",
        (int(account_id),),
        context=f"finding TMDb account id={account_id}",
    )
    if not row:
        return None
    session_id = str(row.get("session_id") or "").strip()
    return session_id or None
