import asyncio
import unittest
from unittest.mock import Mock

from components.root_view import RootView
from services.repositories import PostRepository
from tests.support import RecordingStore, make_context


class RootViewTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = RecordingStore()
        self.context = make_context(self.store)
        self.repo = PostRepository(self.store)

    async def mount(self) -> RootView:
        root = RootView(self.context)
        root.mount()
        await self.context.scheduler.drain()
        return root

    async def test_created_post_appears_first_with_default_author(self):
        await self.repo.create_post("older", "Ann")
        root = await self.mount()

        root.post_form.set_fields(content="Hello")
        await root.post_form.submit()
        await self.context.scheduler.drain()

        first = root.render()["posts"]["items"][0]
        self.assertEqual(first["content"], "Hello")
        self.assertEqual(first["author_name"], "Anonymous")
        self.assertEqual(first["avatar"], "A")
        self.assertEqual(root.refresh_token, 1)

    async def test_delete_post_deletes_once_and_bumps_once(self):
        post = await self.repo.create_post("bye", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)

        self.assertTrue(await item.delete())
        await self.context.scheduler.drain()

        self.assertEqual(self.store.count("delete", "posts"), 1)
        self.assertEqual(root.refresh_token, 1)
        self.assertEqual(root.post_list.posts, [])
        self.context.confirm.assert_called_once_with("Are you sure you want to delete this post?")
        self.assertEqual(self.context.notifier.pending[-1].title, "Post deleted")

    async def test_overlapping_deletes_run_once(self):
        post = await self.repo.create_post("bye", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)

        results = await asyncio.gather(item.delete(), item.delete())
        await self.context.scheduler.drain()

        self.assertEqual(sorted(results), [False, True])
        self.assertEqual(self.store.count("delete", "posts"), 1)
        self.assertEqual(root.refresh_token, 1)
        self.assertEqual([toast.title for toast in self.context.notifier.pending], ["Post deleted"])

    async def test_declined_delete_does_nothing(self):
        post = await self.repo.create_post("stay", "Ann")
        root = await self.mount()

        self.assertFalse(await root.post_list.item(post.id).delete(confirm=Mock(return_value=False)))

        self.assertEqual(self.store.count("delete", "posts"), 0)
        self.assertEqual(root.refresh_token, 0)

    async def test_failed_delete_leaves_post_visible(self):
        post = await self.repo.create_post("stay", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)
        self.store.fail("delete", "posts")

        self.assertFalse(await item.delete())
        await self.context.scheduler.drain()

        self.assertFalse(item.is_deleting)
        self.assertEqual(root.refresh_token, 0)
        self.assertEqual([p.id for p in root.post_list.posts], [post.id])
        self.assertEqual(self.context.notifier.pending[-1].description, "Failed to delete post. Please try again.")

    async def test_like_then_unlike_restores_flag_and_count(self):
        post = await self.repo.create_post("likeable", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)

        await item.toggle_like()
        await self.context.scheduler.drain()
        self.assertTrue(item.is_liked)
        self.assertEqual(item.post.likes_count, 1)

        await item.toggle_like()
        await self.context.scheduler.drain()
        self.assertFalse(item.is_liked)
        self.assertEqual(item.post.likes_count, 0)
        self.assertEqual(root.refresh_token, 2)

    async def test_reload_resets_like_flag(self):
        post = await self.repo.create_post("likeable", "Ann")
        root = await self.mount()
        await root.post_list.item(post.id).toggle_like()
        await self.context.scheduler.drain()

        reloaded = await self.mount()
        item = reloaded.post_list.item(post.id)

        self.assertFalse(item.is_liked)
        self.assertEqual(item.post.likes_count, 1)

    async def test_failed_like_keeps_optimistic_flag(self):
        post = await self.repo.create_post("likeable", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)
        self.store.fail("insert", "likes")

        await item.toggle_like()
        await self.context.scheduler.drain()

        self.assertTrue(item.is_liked)
        self.assertEqual(item.post.likes_count, 0)
        self.assertEqual(root.refresh_token, 0)
        self.assertEqual(self.context.notifier.pending[-1].description, "Failed to update like. Please try again.")

    async def test_comment_section_mounts_on_expand(self):
        post = await self.repo.create_post("discuss", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)

        item.toggle_comments()
        await self.context.scheduler.drain()

        rendered = item.render()
        self.assertTrue(rendered["show_comments"])
        self.assertEqual(rendered["comments"]["state"], "empty")
        self.assertEqual(rendered["comment_form"]["submit_label"], "Reply")

        item.toggle_comments()
        self.assertIsNone(item.comment_list)
        self.assertNotIn("comments", item.render())

    async def test_new_comment_refreshes_posts_not_comments(self):
        post = await self.repo.create_post("discuss", "Ann")
        root = await self.mount()
        item = root.post_list.item(post.id)
        item.toggle_comments()
        await self.context.scheduler.drain()
        post_selects = self.store.count("select", "posts")
        comment_selects = self.store.count("select", "comments")

        item.comment_form.set_fields(content="First!")
        await item.comment_form.submit()
        await self.context.scheduler.drain()

        self.assertEqual(root.refresh_token, 1)
        self.assertEqual(self.store.count("select", "posts"), post_selects + 1)
        self.assertEqual(self.store.count("select", "comments"), comment_selects)
        self.assertEqual(item.comment_list.comments, [])

        # collapsing and expanding mounts a new list, which fetches
        item.toggle_comments()
        item.toggle_comments()
        await self.context.scheduler.drain()
        self.assertEqual([c.content for c in item.comment_list.comments], ["First!"])

    async def test_render_shape(self):
        root = await self.mount()

        rendered = root.render()

        self.assertEqual(rendered["title"], "Social Feed")
        self.assertEqual(rendered["post_form"]["remaining_label"], "280 characters remaining")
        self.assertEqual(rendered["posts"]["state"], "empty")


if __name__ == "__main__":
    unittest.main()
