"""Minimal upsert example against an in-memory SQLite database."""
import sqlalchemy as sa

from UpsertForge import ParameterType, upsert, upsert_rows

engine = sa.create_engine("sqlite:///:memory:")
with engine.begin() as conn:
    conn.execute(sa.text("CREATE TABLE visits(page TEXT PRIMARY KEY, hits INT, first_seen TEXT)"))

for hits in (1, 2):
    affected = (
        upsert(engine)
        .for_table("visits")
        .with_identifier("page", "/home")
        .with_field("hits", hits, ParameterType.INTEGER)
        .with_field("first_seen", "2020-10-20", insert_only=True)
        .execute()
    )
    print("affected:", affected)

upsert_rows(engine, "visits", [{"page": "/about", "hits": 1}], ["page"])

with engine.connect() as conn:
    for row in conn.execute(sa.text("SELECT * FROM visits ORDER BY page")):
        print(row)
