"""
Todos Backend — Repository Contract Tests
=========================================

What:  Behaviour every TodoRepository must share.
How:   Each test takes the parametrized `repository` fixture and therefore
       runs against both TodoMemoryRepository and TodoSQLRepository (SQLite).
"""

import asyncio
import uuid

import pytest

from todos.repositories import TodoRepository


class TestCreateAndGet:

    @pytest.mark.asyncio
    async def test_satisfies_protocol(self, repository):
        """Both backends implement TodoRepository."""
        assert isinstance(repository, TodoRepository)

    @pytest.mark.asyncio
    async def test_create_populates_every_field(self, repository, url_prefix):
        """Create fills id, url and defaults."""
        todo = await repository.create(title="Buy milk", order=3, url_prefix=url_prefix)

        assert isinstance(todo.id, uuid.UUID)
        assert todo.title == "Buy milk"
        assert todo.order == 3
        assert todo.url == f"{url_prefix}{todo.id}"
        assert todo.is_completed is False

    @pytest.mark.asyncio
    async def test_round_trip(self, repository, url_prefix):
        """A created todo reads back unchanged."""
        created = await repository.create(title="Walk the dog", order=None, url_prefix=url_prefix)

        fetched = await repository.get(created.id)

        assert fetched == created
        assert fetched.order is None

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, repository):
        """Unknown ids read as None."""
        assert await repository.get(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_list_empty_store(self, repository):
        """An empty store lists nothing."""
        assert await repository.list() == []


class TestUpdate:

    @pytest.mark.asyncio
    async def test_title_only_leaves_other_fields(self, repository, url_prefix):
        """Updating the title keeps order and completed."""
        todo = await repository.create(title="Draft", order=7, url_prefix=url_prefix)
        await repository.update(todo.id, completed=True)

        updated = await repository.update(todo.id, title="Final")

        assert updated.title == "Final"
        assert updated.order == 7
        assert updated.is_completed is True
        assert updated.url == todo.url
        assert await repository.get(todo.id) == updated

    @pytest.mark.asyncio
    async def test_all_fields_at_once(self, repository, url_prefix):
        """All three fields can change in one update."""
        todo = await repository.create(title="Old", order=1, url_prefix=url_prefix)

        updated = await repository.update(todo.id, title="New", order=2, completed=True)

        assert (updated.title, updated.order, updated.is_completed) == ("New", 2, True)

    @pytest.mark.asyncio
    async def test_can_mark_incomplete_again(self, repository, url_prefix):
        """completed can go back to False."""
        todo = await repository.create(title="Flip", order=None, url_prefix=url_prefix)
        await repository.update(todo.id, completed=True)

        updated = await repository.update(todo.id, completed=False)

        assert updated.is_completed is False

    @pytest.mark.asyncio
    async def test_no_fields_returns_none_for_existing_todo(self, repository, url_prefix):
        """An update with no fields returns None and changes nothing."""
        todo = await repository.create(title="Untouched", order=5, url_prefix=url_prefix)

        assert await repository.update(todo.id) is None
        assert await repository.get(todo.id) == todo

    @pytest.mark.asyncio
    async def test_missing_todo_returns_none(self, repository):
        """Updating an unknown id returns None."""
        assert await repository.update(uuid.uuid4(), title="Ghost") is None

    @pytest.mark.asyncio
    async def test_update_does_not_touch_other_todos(self, repository, url_prefix):
        """Only the addressed todo changes."""
        first = await repository.create(title="First", order=None, url_prefix=url_prefix)
        second = await repository.create(title="Second", order=None, url_prefix=url_prefix)

        await repository.update(first.id, title="Changed")

        assert await repository.get(second.id) == second


class TestDelete:

    @pytest.mark.asyncio
    async def test_second_delete_returns_false(self, repository, url_prefix):
        """Deleting the same todo twice reports False the second time."""
        todo = await repository.create(title="Temporary", order=None, url_prefix=url_prefix)

        assert await repository.delete(todo.id) is True
        assert await repository.delete(todo.id) is False

    @pytest.mark.asyncio
    async def test_deleted_todo_is_gone(self, repository, url_prefix):
        """A deleted todo no longer reads or lists."""
        todo = await repository.create(title="Temporary", order=None, url_prefix=url_prefix)
        await repository.delete(todo.id)

        assert await repository.get(todo.id) is None
        assert await repository.list() == []

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, repository):
        """Deleting an unknown id reports False."""
        assert await repository.delete(uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_delete_all_clears_everything(self, repository, url_prefix):
        """delete_all empties the store."""
        for title in ("a", "b", "c"):
            await repository.create(title=title, order=None, url_prefix=url_prefix)

        await repository.delete_all()

        assert await repository.list() == []

    @pytest.mark.asyncio
    async def test_delete_all_on_empty_store(self, repository):
        """delete_all on an empty store is fine."""
        await repository.delete_all()
        assert await repository.list() == []


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_all_stored(self, repository, url_prefix):
        """Concurrent creates all land with distinct ids."""
        count = 30

        created = await asyncio.gather(
            *(repository.create(title=str(i), order=i, url_prefix=url_prefix) for i in range(count))
        )

        assert len({todo.id for todo in created}) == count
        titles = sorted(todo.title for todo in await repository.list())
        assert titles == sorted(str(i) for i in range(count))

    @pytest.mark.asyncio
    async def test_concurrent_updates_keep_record_whole(self, repository, url_prefix):
        """Concurrent updates never leave a mix of two writes."""
        todo = await repository.create(title="start", order=0, url_prefix=url_prefix)

        await asyncio.gather(
            *(repository.update(todo.id, title=f"title-{i}", order=i) for i in range(10))
        )

        final = await repository.get(todo.id)
        # Whichever update won, its title and order were applied together
        assert final.title == f"title-{final.order}"


class TestScenario:

    @pytest.mark.asyncio
    async def test_end_to_end(self, repository, url_prefix):
        """Create, read, update, list and delete in sequence."""
        hair = await repository.create(title="Wash my hair", order=None, url_prefix=url_prefix)
        teeth = await repository.create(title="Brush my teeth", order=None, url_prefix=url_prefix)

        fetched = await repository.get(hair.id)
        assert fetched.title == "Wash my hair"
        assert fetched.is_completed is False

        patched = await repository.update(teeth.id, completed=True)
        assert patched.is_completed is True
        assert patched.title == "Brush my teeth"

        todos = await repository.list()
        assert hair in todos
        assert patched in todos

        assert await repository.delete(hair.id) is True
        assert await repository.get(hair.id) is None

        await repository.delete_all()
        assert await repository.list() == []
