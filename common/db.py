from contextlib import contextmanager

import psycopg2


@contextmanager
def connection(dsn: str):
    """Open a fresh connection for one unit of work and always close it."""
    conn = psycopg2.connect(dsn)
    try:
        yield conn
    finally:
        conn.close()


def execute_write(dsn: str, query: str, params: tuple = None) -> int:
    """Execute a write statement in its own transaction and return the affected row count."""
    with connection(dsn) as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount
        except Exception:
            conn.rollback()
            raise
