"""
Example 01: Garden Repository

Creates, lists, updates and removes gardens against a temporary SQLite file
using the bundled queries.
"""

import logging
import sqlite3
import tempfile
from dataclasses import asdict

from garden_store import (
    BadRequestError,
    ConnectionConfig,
    Engine,
    GardenRepository,
    NotFoundError,
)

SCHEMA = """
CREATE TABLE users (username TEXT PRIMARY KEY);
CREATE TABLE gardens (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT
);
CREATE TABLE users_gardens (
    username TEXT NOT NULL REFERENCES users (username) ON DELETE CASCADE,
    garden_id INTEGER NOT NULL REFERENCES gardens (id) ON DELETE CASCADE,
    PRIMARY KEY (username, garden_id)
);
CREATE TABLE beds (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    garden_id INTEGER NOT NULL REFERENCES gardens (id) ON DELETE CASCADE
);
INSERT INTO users (username) VALUES ('alice'), ('bob');
"""


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.executescript(SCHEMA)
    conn.close()

    engine = Engine.from_config(ConnectionConfig(driver="sqlite", database=db_path, pool_size=2))
    gardens = GardenRepository(engine)

    created = gardens.create("alice", "Backyard", "Raised beds by the fence")
    gardens.create("alice", "Balcony")
    print("Created:", asdict(created))
    backyard = created.garden

    # Beds have no write API here; add a couple directly
    engine.execute("INSERT INTO beds (name, garden_id) VALUES ($1, $2)", ("Tomatoes", backyard.id))
    engine.execute("INSERT INTO beds (name, garden_id) VALUES ($1, $2)", ("Herbs", backyard.id))

    # Share the backyard with bob
    engine.execute("users_gardens.insert", ("bob", backyard.id))

    print("Full aggregate:", asdict(gardens.get(backyard.id)))

    for summary in gardens.find_all("alice"):
        print("alice owns:", summary.name, "with", summary.users)

    print("Updated:", asdict(gardens.update(backyard.id, {"name": "Back garden"})))

    try:
        gardens.update(backyard.id, {})
    except BadRequestError as e:
        print(f"Rejected ({e.status_code}): {e}")

    print("Removed:", asdict(gardens.remove(backyard.id)))

    try:
        gardens.get(backyard.id)
    except NotFoundError as e:
        print(f"Gone ({e.status_code}): {e}")


if __name__ == "__main__":
    main()
