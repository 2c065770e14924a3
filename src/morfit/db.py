from flask import current_app, g
from psycopg_pool import ConnectionPool


def get_pool() -> ConnectionPool:
    """Connection pool - shared across requests, created on first use."""
    pool = current_app.extensions.get("morfit.pool")
    if pool is None:
        config = current_app.extensions["morfit.config"]
        pool = ConnectionPool(
            config.database_url,
            min_size=2,
            max_size=10,
            kwargs={"autocommit": True},
            open=True,
        )
        current_app.extensions["morfit.pool"] = pool
    return pool


def get_db():
    """Get a database connection for the current request."""
    if "db" not in g:
        g.db = get_pool().getconn()
    return g.db


def close_db(exc=None):
    """Return connection to pool at end of request."""
    db = g.pop("db", None)
    if db is not None:
        get_pool().putconn(db)


def init_app(app):
    app.teardown_appcontext(close_db)
