"""Unit tests for user_service module."""

import unittest
from unittest.mock import MagicMock

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import DuplicateError
from domain.model.result import ErrorKind, Failure, NotFound, Success
from domain.model.user import CreateUserInput, UpdateUserInput, User, UserPatch, UserView
from services.user_service import (
    create_user,
    delete_user,
    get_user,
    list_users,
    patch_user,
    update_user,
)


MATTI = CreateUserInput(first_name='Matti', last_name='Meikäläinen', email='matti@example.com')
MAIJA = CreateUserInput(first_name='Maija', last_name='Virtanen', email='maija@example.com')


class UserServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()

    def _create(self, data: CreateUserInput) -> UserView:
        outcome = create_user(self.repo, data)
        self.assertIsInstance(outcome, Success)
        return outcome.value


class TestCreateUser(UserServiceTestCase):

    def test_create_success(self):
        outcome = create_user(self.repo, MATTI)

        self.assertIsInstance(outcome, Success)
        view = outcome.value
        self.assertTrue(view.id)
        self.assertEqual(view.first_name, 'Matti')
        self.assertEqual(view.last_name, 'Meikäläinen')
        self.assertEqual(view.email, 'matti@example.com')

        stored = self.repo.get_by_id(view.id)
        self.assertEqual(stored.email, 'matti@example.com')
        self.assertEqual(stored.created_at, stored.updated_at)
        self.assertEqual(self.repo.calls, ['add'])

    def test_create_generates_distinct_ids(self):
        a = self._create(MATTI)
        b = self._create(MAIJA)
        self.assertNotEqual(a.id, b.id)

    def test_create_duplicate_email_conflicts(self):
        self._create(MATTI)

        outcome = create_user(self.repo, CreateUserInput('Other', 'Person', 'matti@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)
        self.assertEqual(outcome.value, 'matti@example.com')
        self.assertIn('matti@example.com', outcome.message)
        self.assertEqual(len(self.repo.store), 1)
        self.assertEqual(self.repo.calls, ['add'])

    def test_create_duplicate_email_is_case_insensitive(self):
        self._create(MATTI)

        outcome = create_user(self.repo, CreateUserInput('Other', 'Person', 'MATTI@Example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)

    def test_create_stores_normalized_email(self):
        view = self._create(CreateUserInput('Matti', 'M', '  Matti@Example.COM '))
        self.assertEqual(view.email, 'matti@example.com')

    def test_create_empty_first_name_is_invalid(self):
        outcome = create_user(self.repo, CreateUserInput('', 'Meikäläinen', 'matti@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)
        self.assertIn('First name', outcome.message)
        self.assertEqual(self.repo.calls, [])

    def test_create_non_string_field_is_invalid(self):
        outcome = create_user(self.repo, CreateUserInput(123, 'Meikäläinen', 'matti@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(self.repo.calls, [])

    def test_create_non_string_email_is_invalid(self):
        outcome = create_user(self.repo, CreateUserInput('Matti', 'Meikäläinen', None))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)

    def test_create_malformed_email_is_invalid(self):
        outcome = create_user(self.repo, CreateUserInput('Matti', 'M', 'invalid'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(self.repo.get_all(), [])

    def test_create_lost_race_reports_conflict(self):
        """Store-level unique index rejection becomes CONFLICT."""
        repo = MagicMock()
        repo.get_by_email.return_value = None
        repo.add.side_effect = DuplicateError('matti@example.com')

        outcome = create_user(repo, MATTI)

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)

    def test_create_infrastructure_error_propagates(self):
        repo = MagicMock()
        repo.get_by_email.side_effect = ConnectionError('storage unavailable')

        with self.assertRaises(ConnectionError):
            create_user(repo, MATTI)
        repo.add.assert_not_called()


class TestReadUsers(UserServiceTestCase):

    def test_get_user_found(self):
        created = self._create(MATTI)

        view = get_user(self.repo, created.id)

        self.assertEqual(view, created)

    def test_get_user_not_found(self):
        self.assertIsNone(get_user(self.repo, 'nonexistent'))

    def test_list_users_empty(self):
        self.assertEqual(list_users(self.repo), [])

    def test_list_users_returns_views(self):
        self._create(MATTI)
        self._create(MAIJA)

        views = list_users(self.repo)

        self.assertEqual(len(views), 2)
        self.assertTrue(all(isinstance(v, UserView) for v in views))
        self.assertEqual({v.email for v in views}, {'matti@example.com', 'maija@example.com'})

    def test_list_users_propagates_repository_failure(self):
        repo = MagicMock()
        repo.get_all.side_effect = RuntimeError('storage unavailable')

        with self.assertRaises(RuntimeError):
            list_users(repo)


class TestUpdateUser(UserServiceTestCase):

    def test_update_success(self):
        created = self._create(MATTI)

        outcome = update_user(self.repo, created.id, UpdateUserInput('Maija', 'Virtanen', 'maija@example.com'))

        self.assertIsInstance(outcome, Success)
        self.assertEqual(outcome.value.id, created.id)
        self.assertEqual(outcome.value.first_name, 'Maija')
        self.assertEqual(outcome.value.email, 'maija@example.com')
        self.assertGreaterEqual(outcome.value.updated_at, created.updated_at)
        self.assertEqual(outcome.value.created_at, created.created_at)
        self.assertEqual(self.repo.get_by_id(created.id).last_name, 'Virtanen')

    def test_update_not_found_skips_write(self):
        outcome = update_user(self.repo, 'nonexistent', UpdateUserInput('Maija', 'Virtanen', 'maija@example.com'))

        self.assertIsInstance(outcome, NotFound)
        self.assertEqual(outcome.id, 'nonexistent')
        self.assertNotIn('update', self.repo.calls)

    def test_update_keeping_own_email_succeeds(self):
        created = self._create(MATTI)

        outcome = update_user(self.repo, created.id, UpdateUserInput('Matias', 'Meikäläinen', 'matti@example.com'))

        self.assertIsInstance(outcome, Success)
        self.assertEqual(outcome.value.first_name, 'Matias')

    def test_update_own_email_with_different_case_succeeds(self):
        created = self._create(MATTI)

        outcome = update_user(self.repo, created.id, UpdateUserInput('Matti', 'M', 'MATTI@example.com'))

        self.assertIsInstance(outcome, Success)
        self.assertEqual(outcome.value.email, 'matti@example.com')

    def test_update_to_email_of_other_user_conflicts(self):
        matti = self._create(MATTI)
        self._create(MAIJA)

        outcome = update_user(self.repo, matti.id, UpdateUserInput('Matti', 'M', 'maija@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)
        self.assertEqual(outcome.value, 'maija@example.com')
        self.assertEqual(self.repo.get_by_id(matti.id).email, 'matti@example.com')
        self.assertNotIn('update', self.repo.calls)

    def test_update_to_free_email_succeeds(self):
        matti = self._create(MATTI)
        self._create(MAIJA)

        outcome = update_user(self.repo, matti.id, UpdateUserInput('Matti', 'M', 'free@example.com'))

        self.assertIsInstance(outcome, Success)
        self.assertEqual(outcome.value.email, 'free@example.com')

    def test_update_invalid_input(self):
        created = self._create(MATTI)

        outcome = update_user(self.repo, created.id, UpdateUserInput('Matti', '', 'matti@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)
        self.assertNotIn('update', self.repo.calls)

    def test_update_non_string_field_is_invalid(self):
        created = self._create(MATTI)

        outcome = update_user(self.repo, created.id, UpdateUserInput('Matti', 'M', 12345))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)
        self.assertNotIn('update', self.repo.calls)

    def test_update_not_found_takes_precedence_over_invalid_input(self):
        outcome = update_user(self.repo, 'nonexistent', UpdateUserInput('', '', 'bad'))
        self.assertIsInstance(outcome, NotFound)

    def test_update_lost_race_reports_conflict(self):
        user = User.create('Matti', 'M', 'matti@example.com')
        repo = MagicMock()
        repo.get_by_id.return_value = user
        repo.get_by_email.return_value = None
        repo.update.side_effect = DuplicateError('taken@example.com')

        outcome = update_user(repo, user.id, UpdateUserInput('Matti', 'M', 'taken@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)


class TestPatchUser(UserServiceTestCase):

    def test_patch_only_changes_supplied_fields(self):
        created = self._create(MATTI)

        outcome = patch_user(self.repo, created.id, UserPatch(last_name='Virtanen'))

        self.assertIsInstance(outcome, Success)
        self.assertEqual(outcome.value.first_name, 'Matti')
        self.assertEqual(outcome.value.last_name, 'Virtanen')
        self.assertEqual(outcome.value.email, 'matti@example.com')

    def test_patch_email_conflict(self):
        matti = self._create(MATTI)
        self._create(MAIJA)

        outcome = patch_user(self.repo, matti.id, UserPatch(email='maija@example.com'))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.CONFLICT)

    def test_patch_empty_name_is_invalid(self):
        created = self._create(MATTI)

        outcome = patch_user(self.repo, created.id, UserPatch(first_name='  '))

        self.assertIsInstance(outcome, Failure)
        self.assertEqual(outcome.kind, ErrorKind.INVALID_INPUT)

    def test_patch_not_found(self):
        outcome = patch_user(self.repo, 'nonexistent', UserPatch(first_name='X'))
        self.assertIsInstance(outcome, NotFound)


class TestDeleteUser(UserServiceTestCase):

    def test_delete_existing(self):
        created = self._create(MATTI)

        self.assertTrue(delete_user(self.repo, created.id))
        self.assertIsNone(get_user(self.repo, created.id))
        self.assertEqual(self.repo.calls, ['add', 'delete'])

    def test_delete_missing_returns_false_without_delete_call(self):
        self.assertFalse(delete_user(self.repo, 'nonexistent'))
        self.assertNotIn('delete', self.repo.calls)


class TestEmailLifecycleScenario(UserServiceTestCase):
    """An email is free again once its owner moves to another one."""

    def test_scenario(self):
        a = self._create(CreateUserInput('Anna', 'A', 'a@x.com'))

        dup = create_user(self.repo, CreateUserInput('Bert', 'B', 'a@x.com'))
        self.assertIsInstance(dup, Failure)
        self.assertEqual(dup.kind, ErrorKind.CONFLICT)

        moved = update_user(self.repo, a.id, UpdateUserInput('Anna', 'A', 'b@x.com'))
        self.assertIsInstance(moved, Success)

        c = create_user(self.repo, CreateUserInput('Cecilia', 'C', 'a@x.com'))
        self.assertIsInstance(c, Success)
        self.assertEqual(len(list_users(self.repo)), 2)


if __name__ == '__main__':
    unittest.main()
