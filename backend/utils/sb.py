# backend/utils/sb.py
# this file is for Supabase utility functions

from errors import StoreQueryError


def sb_exec(q):
    try:
        res = q.execute()
    except Exception as e:
        return None, f"{type(e).__name__}: {e}"
    if res is None:
        # maybe_single() returns None when no row matches
        return None, None
    if hasattr(res, "data"):
        return res.data, None
    if isinstance(res, dict):
        return res.get("data"), res.get("error")
    return res, None


def sb_rows(name, q):
    """
    Run a select and return its rows, raising StoreQueryError on failure.
    Usage: rows = sb_rows("admins", sb.table("profiles").select("email"))
    """
    rows, err = sb_exec(q)
    if err:
        raise StoreQueryError(f"{name} query failed: {err}")
    if rows is None:
        return []
    if isinstance(rows, dict):
        return [rows]
    return list(rows)
