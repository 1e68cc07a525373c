"""
SQLAlchemy table definitions for FXDash.

Each instrument lives in its own table of daily candles, loaded from a
Spanish-language export:
- fecha    -> date
- último   -> close
- apertura -> open
- máximo   -> high
- mínimo   -> low
"""

from sqlalchemy import Column, DateTime, Float, MetaData, Table

metadata = MetaData()


def price_table(name: str, meta: MetaData = metadata) -> Table:
    """
    Get (or declare) the daily price table called `name`.

    Column keys are English so queries read as table.c.close etc.
    """
    if name in meta.tables:
        return meta.tables[name]

    return Table(
        name,
        meta,
        Column("fecha", DateTime, primary_key=True, key="date"),
        Column("último", Float, nullable=False, key="close"),
        Column("apertura", Float, nullable=False, key="open"),
        Column("máximo", Float, nullable=False, key="high"),
        Column("mínimo", Float, nullable=False, key="low"),
    )
