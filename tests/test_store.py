import unittest

from services.store import COMMENTS, LIKES, POSTS, MemoryStore


class MemoryStoreTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = MemoryStore()

    async def test_insert_assigns_id_timestamp_and_zero_likes(self):
        result = await self.store.insert(POSTS, [{"content": "hi", "author_name": "Ann"}])

        self.assertTrue(result.success)
        row = result.data[0]
        self.assertTrue(row["id"])
        self.assertIsNotNone(row["created_at"])
        self.assertEqual(row["likes_count"], 0)

    async def test_select_orders_and_filters(self):
        for content in ("a", "b", "c"):
            await self.store.insert(POSTS, [{"content": content, "author_name": "x"}])

        newest_first = await self.store.select(POSTS, order_by="created_at", ascending=False)
        self.assertEqual([row["content"] for row in newest_first.data], ["c", "b", "a"])

        only_b = await self.store.select(POSTS, filters={"content": "b"})
        self.assertEqual(len(only_b.data), 1)

    async def test_likes_maintain_post_count(self):
        post = (await self.store.insert(POSTS, [{"content": "hi", "author_name": "x"}])).data[0]

        await self.store.insert(LIKES, [{"post_id": post["id"], "author_name": "You"}])
        await self.store.insert(LIKES, [{"post_id": post["id"], "author_name": "Someone"}])
        rows = (await self.store.select(POSTS)).data
        self.assertEqual(rows[0]["likes_count"], 2)

        await self.store.delete(LIKES, {"post_id": post["id"], "author_name": "You"})
        rows = (await self.store.select(POSTS)).data
        self.assertEqual(rows[0]["likes_count"], 1)

    async def test_delete_requires_filter(self):
        await self.store.insert(COMMENTS, [{"post_id": "p", "content": "c", "author_name": "x"}])

        result = await self.store.delete(COMMENTS, {})

        self.assertFalse(result.success)
        self.assertEqual(len((await self.store.select(COMMENTS)).data), 1)

    async def test_unknown_collection_is_an_error_value(self):
        result = await self.store.select("users")
        self.assertIsNotNone(result.error)

    async def test_selected_rows_are_copies(self):
        await self.store.insert(POSTS, [{"content": "hi", "author_name": "x"}])

        row = (await self.store.select(POSTS)).data[0]
        row["content"] = "changed"

        self.assertEqual((await self.store.select(POSTS)).data[0]["content"], "hi")


if __name__ == "__main__":
    unittest.main()
