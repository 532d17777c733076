# tests/testing_db.py
# Shared fixtures: every test case gets its own empty in-memory database.
import unittest

from wardrobe_project.db.database import Base, IN_MEMORY_SQLITE_URL, make_engine, make_session_factory
from wardrobe_project.db import orm_models  # noqa: F401


class AsyncDBTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.engine = make_engine(IN_MEMORY_SQLITE_URL)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session_factory = make_session_factory(self.engine)
        self.db = self.session_factory()

    async def asyncTearDown(self):
        await self.db.close()
        await self.engine.dispose()
