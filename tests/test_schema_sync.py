# tests/test_schema_sync.py
import unittest
import uuid

from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool

from wardrobe_project.db.database import IN_MEMORY_SQLITE_URL, make_engine, make_session_factory
from wardrobe_project.db.schema_sync import sync_schema, init_db
from wardrobe_project.services import category_service, wardrobe_service
from wardrobe_project.models.clothing_models import ClothingItemCreate

# clothing_items as an early release created it
LEGACY_CLOTHING_TABLE = """
CREATE TABLE clothing_items (
    id VARCHAR(32) NOT NULL PRIMARY KEY,
    name VARCHAR NOT NULL,
    category VARCHAR NOT NULL,
    color VARCHAR,
    image_uri VARCHAR
)
"""


class TestSchemaSync(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.engine = make_engine(IN_MEMORY_SQLITE_URL)

    async def asyncTearDown(self):
        await self.engine.dispose()

    async def _columns(self, table_name):
        async with self.engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns(table_name)})

    async def test_fresh_database(self):
        added = await sync_schema(self.engine)
        self.assertEqual(added, {})
        async with self.engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        self.assertTrue({"users", "categories", "clothing_items", "outfits", "wear_records", "shopping_items"} <= tables)

    async def test_adds_missing_columns_and_keeps_rows(self):
        legacy_id = uuid.uuid4().hex
        async with self.engine.begin() as conn:
            await conn.execute(text(LEGACY_CLOTHING_TABLE))
            await conn.execute(
                text("INSERT INTO clothing_items (id, name, category) VALUES (:id, 'Old tee', 'Top')"),
                {"id": legacy_id},
            )

        added = await sync_schema(self.engine)

        self.assertIn("clothing_items", added)
        for column in ("season", "wear_count", "activity_score", "tags", "analysis", "category_id"):
            self.assertIn(column, added["clothing_items"])
        self.assertNotIn("name", added["clothing_items"])
        self.assertIn("activity_score", await self._columns("clothing_items"))

        session = make_session_factory(self.engine)()
        try:
            legacy = await wardrobe_service.get_clothing_item_by_id(session, uuid.UUID(legacy_id))
            self.assertEqual(legacy.name, "Old tee")
            self.assertEqual(legacy.season, "All")
            self.assertEqual(legacy.wear_count, 0)
            self.assertEqual(legacy.activity_score, 0)

            fresh = await wardrobe_service.add_clothing_item(session, ClothingItemCreate(name="New tee", category="Top"))
            self.assertEqual(fresh.activity_score, 0)
        finally:
            await session.close()

    async def test_second_run_is_a_no_op(self):
        await sync_schema(self.engine)
        self.assertEqual(await sync_schema(self.engine), {})

    async def test_init_db_seeds_categories(self):
        session_factory = make_session_factory(self.engine)
        await init_db(self.engine, session_factory=session_factory)
        await init_db(self.engine, session_factory=session_factory)

        async with session_factory() as session:
            categories = await category_service.get_all_categories(session)
        self.assertEqual(len(categories), len(category_service.DEFAULT_CATEGORIES))


class TestEngineFactory(unittest.IsolatedAsyncioTestCase):

    async def test_in_memory_engine_keeps_one_database(self):
        engine = make_engine(IN_MEMORY_SQLITE_URL)
        self.assertIsInstance(engine.pool, StaticPool)
        try:
            async with engine.begin() as conn:
                await conn.execute(text("CREATE TABLE marker (id INTEGER)"))
            async with engine.connect() as conn:
                tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            self.assertIn("marker", tables)
        finally:
            await engine.dispose()

    async def test_sessions_keep_attributes_after_commit(self):
        self.assertFalse(make_session_factory(make_engine(IN_MEMORY_SQLITE_URL)).kw["expire_on_commit"])


if __name__ == '__main__':
    unittest.main()
