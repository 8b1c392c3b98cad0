"""
Query Backend Tests
===================

Runs compiled filters against the database (to_q / QuerysetBackend) and
checks that the in-memory backend agrees with it on the same records.

Run tests:
    python manage.py test apps.querying.tests.test_backends
"""

from datetime import datetime

from django.test import TestCase
from django.utils import timezone

from apps.accounts.models import User
from apps.contacts.catalog import CATALOG as CONTACTS
from apps.contacts.models import Contact
from apps.customfields.models import CustomFieldDefinition
from apps.deals.catalog import CATALOG as DEALS
from apps.deals.models import Deal
from apps.querying import expressions as ex
from apps.querying.backends import MemoryBackend, QuerysetBackend, evaluate, to_q
from apps.querying.compiler import ColumnFilter, compile_filters


def aware(*args):
    return timezone.make_aware(datetime(*args))


class BackendTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='owner@dealdesk.io', password='testpass123')
        self.other_user = User.objects.create_user(email='other@dealdesk.io', password='testpass123')

        for key, field_type in (('budget', 'number'), ('renewal', 'date'), ('vip', 'boolean')):
            CustomFieldDefinition.objects.create(
                owner=self.user, entity_type='contact', field_key=key, label=key.title(), field_type=field_type,
            )
        self.definitions = list(CustomFieldDefinition.objects.for_entity(self.user, 'contact'))

    def contact(self, owner=None, created_at=None, **fields):
        record = Contact.objects.create(owner=owner or self.user, **fields)
        if created_at is not None:
            Contact.objects.filter(pk=record.pk).update(created_at=created_at)
            record.refresh_from_db()
        return record

    def db_ids(self, filters=(), search='', catalog=CONTACTS, queryset=None):
        compiled = compile_filters(catalog, self.user.id, search, list(filters), self.definitions)
        queryset = queryset if queryset is not None else Contact.objects.all()
        return sorted(QuerysetBackend(queryset).filter(compiled.predicate).values_list('id', flat=True))

    def memory_ids(self, filters=(), search='', catalog=CONTACTS, queryset=None):
        compiled = compile_filters(catalog, self.user.id, search, list(filters), self.definitions)
        queryset = queryset if queryset is not None else Contact.objects.all()
        return sorted(record.id for record in MemoryBackend(queryset).filter(compiled.predicate))

    def assertMatches(self, filters, expected, **kwargs):
        """Both backends must return exactly the expected records."""
        expected_ids = sorted(record.id for record in expected)
        self.assertEqual(self.db_ids(filters, **kwargs), expected_ids)
        self.assertEqual(self.memory_ids(filters, **kwargs), expected_ids)


class TextQueryTest(BackendTestCase):
    """Test text filters in the database"""

    def setUp(self):
        super().setUp()
        self.acme = self.contact(first_name='Ada', last_name='Lovelace', company='Acme Corp')
        self.the_acme = self.contact(first_name='Grace', last_name='Hopper', company='The Acme Co')
        self.bare = self.contact(first_name='Alan', last_name='Turing', company='Acme')

    def test_starts_with(self):
        self.assertMatches([ColumnFilter('company', 'startsWith', 'Acme')], [self.acme, self.bare])

    def test_equals_is_exact(self):
        self.assertMatches([ColumnFilter('company', 'equals', 'acme')], [self.bare])

    def test_name_matches_either_part(self):
        self.assertMatches([ColumnFilter('name', 'contains', 'hop')], [self.the_acme])
        self.assertMatches([ColumnFilter('name', 'startsWith', 'a')], [self.acme, self.bare])

    def test_search(self):
        self.assertMatches([], [self.acme, self.the_acme, self.bare], search='acme')
        self.assertMatches([], [self.the_acme], search='grace')


class OwnerScopeTest(BackendTestCase):

    def test_other_owners_records_are_never_returned(self):
        mine = self.contact(company='Acme')
        self.contact(owner=self.other_user, company='Acme')

        self.assertMatches([ColumnFilter('company', 'contains', 'acme')], [mine])
        self.assertMatches([], [mine], search='acme')


class NumberQueryTest(BackendTestCase):
    """Test the guarded numeric cast"""

    def setUp(self):
        super().setUp()
        self.small = self.contact(first_name='Small', custom_fields={'budget': 50})
        self.exact = self.contact(first_name='Exact', custom_fields={'budget': 100})
        self.large = self.contact(first_name='Large', custom_fields={'budget': '250.5'})
        self.unknown = self.contact(first_name='Unknown', custom_fields={'budget': 'N/A'})
        self.missing = self.contact(first_name='Missing')

    def test_gt_excludes_non_numeric_values(self):
        self.assertMatches([ColumnFilter('budget', 'gt', '100')], [self.large])

    def test_lte(self):
        self.assertMatches([ColumnFilter('budget', 'lte', '100')], [self.small, self.exact])

    def test_eq(self):
        self.assertMatches([ColumnFilter('budget', 'eq', '250.5')], [self.large])

    def test_deal_value(self):
        big = Deal.objects.create(owner=self.user, name='Big', value='12000.00')
        Deal.objects.create(owner=self.user, name='Small', value='900')
        Deal.objects.create(owner=self.user, name='Unknown', value='TBD')
        Deal.objects.create(owner=self.user, name='Empty', value='')

        self.assertMatches([ColumnFilter('value', 'gte', '1000')], [big], catalog=DEALS, queryset=Deal.objects.all())


class DateQueryTest(BackendTestCase):
    """Test day boundaries of date filters"""

    def setUp(self):
        super().setUp()
        self.start = self.contact(first_name='Start', created_at=aware(2024, 3, 15, 0, 0, 0))
        self.end = self.contact(first_name='End', created_at=aware(2024, 3, 15, 23, 59, 59))
        self.next_day = self.contact(first_name='Next', created_at=aware(2024, 3, 16, 0, 0, 1))
        self.day_before = self.contact(first_name='Before', created_at=aware(2024, 3, 14, 23, 59, 59))

    def test_on(self):
        self.assertMatches([ColumnFilter('createdAt', 'on', '2024-03-15')], [self.start, self.end])

    def test_before_and_after(self):
        self.assertMatches([ColumnFilter('createdAt', 'before', '2024-03-15')], [self.day_before])
        self.assertMatches([ColumnFilter('createdAt', 'after', '2024-03-15')], [self.end, self.next_day])

    def test_between(self):
        self.assertMatches(
            [ColumnFilter('createdAt', 'between', '2024-03-15', '2024-03-16')],
            [self.start, self.end, self.next_day],
        )

    def test_malformed_date_skips_the_filter(self):
        self.assertMatches(
            [ColumnFilter('createdAt', 'on', 'not-a-date')],
            [self.start, self.end, self.next_day, self.day_before],
        )

    def test_custom_date_field(self):
        june = self.contact(custom_fields={'renewal': '2024-06-30'})
        self.contact(custom_fields={'renewal': '2024-07-01'})

        self.assertMatches([ColumnFilter('renewal', 'between', '2024-06-01', '2024-06-30')], [june])


class EnumQueryTest(BackendTestCase):

    def test_boolean_custom_field(self):
        vip = self.contact(custom_fields={'vip': True})
        regular = self.contact(custom_fields={'vip': False})
        self.contact()

        self.assertMatches([ColumnFilter('vip', 'equals', 'true')], [vip])
        self.assertMatches([ColumnFilter('vip', 'equals', 'false')], [regular])

    def test_stage_in(self):
        lead = Deal.objects.create(owner=self.user, name='A', stage='lead')
        Deal.objects.create(owner=self.user, name='B', stage='proposal')
        won = Deal.objects.create(owner=self.user, name='C', stage='closed-won')

        self.assertMatches(
            [ColumnFilter('stage', 'in', 'lead,closed-won')], [lead, won],
            catalog=DEALS, queryset=Deal.objects.all(),
        )


class LoweringTest(BackendTestCase):
    """Test to_q on hand-built trees"""

    def test_empty_any_of_matches_nothing(self):
        self.contact(first_name='Ada')
        self.assertFalse(Contact.objects.filter(to_q(ex.AnyOf())).exists())

    def test_empty_all_of_matches_everything(self):
        self.contact(first_name='Ada')
        self.contact(owner=self.other_user, first_name='Grace')
        self.assertEqual(Contact.objects.filter(to_q(ex.AllOf())).count(), 2)

    def test_query_pages_and_counts(self):
        for index in range(5):
            self.contact(first_name=f'Contact {index}')

        compiled = compile_filters(CONTACTS, self.user.id)
        records, total = QuerysetBackend(Contact.objects.order_by('id')).query(compiled.predicate, limit=2, offset=1)

        self.assertEqual(total, 5)
        self.assertEqual([record.first_name for record in records], ['Contact 1', 'Contact 2'])

    def test_evaluate_reads_model_instances(self):
        record = self.contact(company='Acme', custom_fields={'budget': '10'})
        condition = ex.Condition(ex.FieldRef('budget', ex.NUMBER_KIND, custom=True), 'lt', 20.0)

        self.assertTrue(evaluate(condition, record))
        self.assertFalse(evaluate(ex.Condition(ex.FieldRef('company'), 'iexact', 'acme co'), record))
