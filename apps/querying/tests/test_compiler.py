"""
Filter Compiler Tests
=====================

Compiles column filters and checks the result against in-memory records
(MemoryBackend), so no database is needed.

Test Coverage:
1. Text operators (contains, equals, startsWith, endsWith, name = first OR last)
2. Number operators, incl. stored values that are not numbers
3. Date operators at day granularity
4. Enum and boolean custom fields
5. Skipped filters (unknown column, wrong operator, empty/malformed values)
6. Ownership and free-text search

Run tests:
    python manage.py test apps.querying.tests.test_compiler
"""

from datetime import datetime

from django.test import SimpleTestCase
from django.utils import timezone

from apps.contacts.catalog import CATALOG as CONTACTS
from apps.customfields.models import CustomFieldDefinition
from apps.deals.catalog import CATALOG as DEALS
from apps.querying import expressions as ex
from apps.querying.backends import MemoryBackend
from apps.querying.compiler import ColumnFilter, compile_filters, parse_filter_date, parse_number

OWNER = 1
OTHER_OWNER = 2


def aware(*args):
    return timezone.make_aware(datetime(*args))


def contact(pk, owner=OWNER, **fields):
    record = {
        'id': pk,
        'owner_id': owner,
        'first_name': '',
        'last_name': '',
        'email': '',
        'phone': '',
        'company': '',
        'job_title': '',
        'notes': '',
        'custom_fields': {},
        'created_at': aware(2024, 1, 1, 12, 0),
    }
    record.update(fields)
    return record


class CompilerTestCase(SimpleTestCase):

    def setUp(self):
        self.definitions = [
            CustomFieldDefinition(field_key='budget', field_type='number', entity_type='contact'),
            CustomFieldDefinition(field_key='renewal', field_type='date', entity_type='contact'),
            CustomFieldDefinition(field_key='vip', field_type='boolean', entity_type='contact'),
            CustomFieldDefinition(field_key='segment', field_type='text', entity_type='contact'),
        ]

    def matching_ids(self, records, filters=(), search='', catalog=CONTACTS, owner=OWNER):
        compiled = compile_filters(catalog, owner, search, list(filters), self.definitions)
        return sorted(record['id'] for record in MemoryBackend(records).filter(compiled.predicate))


class TextFilterTest(CompilerTestCase):
    """Test text operators"""

    def setUp(self):
        super().setUp()
        self.records = [
            contact(1, first_name='Ada', last_name='Lovelace', company='Acme Corp'),
            contact(2, first_name='Grace', last_name='Hopper', company='The Acme Co'),
            contact(3, first_name='Alan', last_name='Turing', company='acme'),
        ]

    def test_starts_with_excludes_infix_match(self):
        """startsWith "Acme" matches "Acme Corp" but not "The Acme Co" """
        ids = self.matching_ids(self.records, [ColumnFilter('company', 'startsWith', 'Acme')])
        self.assertEqual(ids, [1, 3])

    def test_contains_is_case_insensitive(self):
        ids = self.matching_ids(self.records, [ColumnFilter('company', 'contains', 'ACME')])
        self.assertEqual(ids, [1, 2, 3])

    def test_ends_with(self):
        ids = self.matching_ids(self.records, [ColumnFilter('company', 'endsWith', ' co')])
        self.assertEqual(ids, [2])

    def test_equals_is_exact_not_substring(self):
        """equals "acme" only matches the company that is exactly acme"""
        ids = self.matching_ids(self.records, [ColumnFilter('company', 'equals', 'ACME')])
        self.assertEqual(ids, [3])

    def test_name_matches_first_or_last_name(self):
        ids = self.matching_ids(self.records, [ColumnFilter('name', 'startsWith', 'Ho')])
        self.assertEqual(ids, [2])

        ids = self.matching_ids(self.records, [ColumnFilter('name', 'startsWith', 'A')])
        self.assertEqual(ids, [1, 3])

    def test_custom_text_field(self):
        self.records[0]['custom_fields'] = {'segment': 'Enterprise'}
        self.records[1]['custom_fields'] = {'segment': 'SMB'}

        ids = self.matching_ids(self.records, [ColumnFilter('segment', 'contains', 'enter')])
        self.assertEqual(ids, [1])

    def test_two_filters_on_same_column_are_anded(self):
        filters = [
            ColumnFilter('company', 'contains', 'acme'),
            ColumnFilter('company', 'endsWith', 'corp'),
        ]
        self.assertEqual(self.matching_ids(self.records, filters), [1])


class NumberFilterTest(CompilerTestCase):
    """Test number operators"""

    def setUp(self):
        super().setUp()
        self.records = [
            contact(1, custom_fields={'budget': 50}),
            contact(2, custom_fields={'budget': 100}),
            contact(3, custom_fields={'budget': '250.5'}),
            contact(4, custom_fields={'budget': 'N/A'}),
            contact(5, custom_fields={}),
        ]

    def test_gt_excludes_non_numeric_values(self):
        """gt 100 never matches "N/A" or a missing value"""
        ids = self.matching_ids(self.records, [ColumnFilter('budget', 'gt', '100')])
        self.assertEqual(ids, [3])

    def test_each_operator(self):
        cases = {
            'gt': [3],
            'gte': [2, 3],
            'lt': [1],
            'lte': [1, 2],
            'eq': [2],
        }
        for operator, expected in cases.items():
            with self.subTest(operator=operator):
                ids = self.matching_ids(self.records, [ColumnFilter('budget', operator, '100')])
                self.assertEqual(ids, expected)

    def test_unparseable_filter_value_is_skipped(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('budget', 'gt', 'lots')], self.definitions)
        self.assertEqual(len(compiled.skipped), 1)
        self.assertEqual(self.matching_ids(self.records, [ColumnFilter('budget', 'gt', 'lots')]), [1, 2, 3, 4, 5])

    def test_deal_value_stored_as_text(self):
        deals = [
            {'id': 1, 'owner_id': OWNER, 'name': 'Big', 'value': '12000.00', 'custom_fields': {}},
            {'id': 2, 'owner_id': OWNER, 'name': 'Small', 'value': '900', 'custom_fields': {}},
            {'id': 3, 'owner_id': OWNER, 'name': 'Unknown', 'value': 'TBD', 'custom_fields': {}},
            {'id': 4, 'owner_id': OWNER, 'name': 'Empty', 'value': '', 'custom_fields': {}},
        ]
        ids = self.matching_ids(deals, [ColumnFilter('value', 'gte', '1000')], catalog=DEALS)
        self.assertEqual(ids, [1])


class DateFilterTest(CompilerTestCase):
    """Test date operators (day granularity in the current time zone)"""

    def setUp(self):
        super().setUp()
        self.records = [
            contact(1, created_at=aware(2024, 3, 15, 0, 0, 0)),
            contact(2, created_at=aware(2024, 3, 15, 23, 59, 59)),
            contact(3, created_at=aware(2024, 3, 16, 0, 0, 1)),
            contact(4, created_at=aware(2024, 3, 14, 23, 59, 59)),
        ]

    def test_on_covers_the_whole_day(self):
        ids = self.matching_ids(self.records, [ColumnFilter('createdAt', 'on', '2024-03-15')])
        self.assertEqual(ids, [1, 2])

    def test_before_is_strictly_before_the_day(self):
        ids = self.matching_ids(self.records, [ColumnFilter('createdAt', 'before', '2024-03-15')])
        self.assertEqual(ids, [4])

    def test_after_is_strictly_after_the_start_of_the_day(self):
        ids = self.matching_ids(self.records, [ColumnFilter('createdAt', 'after', '2024-03-15')])
        self.assertEqual(ids, [2, 3])

    def test_after_on_a_custom_date_excludes_the_day_itself(self):
        records = [
            contact(1, custom_fields={'renewal': '2024-03-15'}),
            contact(2, custom_fields={'renewal': '2024-03-16'}),
        ]
        ids = self.matching_ids(records, [ColumnFilter('renewal', 'after', '2024-03-15')])
        self.assertEqual(ids, [2])

    def test_between_is_inclusive_at_both_ends(self):
        records = [
            contact(1, created_at=aware(2024, 1, 1, 0, 0)),
            contact(2, created_at=aware(2024, 1, 31, 23, 59, 59)),
            contact(3, created_at=aware(2023, 12, 31, 23, 59, 59)),
            contact(4, created_at=aware(2024, 2, 1, 0, 0)),
        ]
        ids = self.matching_ids(records, [ColumnFilter('createdAt', 'between', '2024-01-01', '2024-01-31')])
        self.assertEqual(ids, [1, 2])

    def test_between_without_second_value_is_skipped(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('createdAt', 'between', '2024-01-01')])
        self.assertEqual(len(compiled.skipped), 1)

    def test_malformed_date_is_skipped(self):
        for value in ('15/03/2024', '2024-02-30', 'yesterday'):
            with self.subTest(value=value):
                compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('createdAt', 'on', value)])
                self.assertEqual(len(compiled.skipped), 1)
                self.assertEqual(self.matching_ids(self.records, [ColumnFilter('createdAt', 'on', value)]), [1, 2, 3, 4])

    def test_custom_date_field_compares_iso_text(self):
        records = [
            contact(1, custom_fields={'renewal': '2024-06-01'}),
            contact(2, custom_fields={'renewal': '2024-06-30'}),
            contact(3, custom_fields={'renewal': '2024-07-01'}),
            contact(4, custom_fields={'renewal': 'soon'}),
        ]
        ids = self.matching_ids(records, [ColumnFilter('renewal', 'between', '2024-06-01', '2024-06-30')])
        self.assertEqual(ids, [1, 2])


class EnumFilterTest(CompilerTestCase):
    """Test enum operators on built-in and boolean custom fields"""

    def setUp(self):
        super().setUp()
        self.deals = [
            {'id': 1, 'owner_id': OWNER, 'name': 'A', 'stage': 'lead', 'custom_fields': {}},
            {'id': 2, 'owner_id': OWNER, 'name': 'B', 'stage': 'proposal', 'custom_fields': {}},
            {'id': 3, 'owner_id': OWNER, 'name': 'C', 'stage': 'closed-won', 'custom_fields': {}},
        ]

    def test_equals(self):
        ids = self.matching_ids(self.deals, [ColumnFilter('stage', 'equals', 'proposal')], catalog=DEALS)
        self.assertEqual(ids, [2])

    def test_in_comma_joined_set(self):
        ids = self.matching_ids(self.deals, [ColumnFilter('stage', 'in', 'lead, closed-won')], catalog=DEALS)
        self.assertEqual(ids, [1, 3])

    def test_boolean_custom_field(self):
        records = [
            contact(1, custom_fields={'vip': True}),
            contact(2, custom_fields={'vip': False}),
            contact(3, custom_fields={}),
        ]
        self.assertEqual(self.matching_ids(records, [ColumnFilter('vip', 'equals', 'true')]), [1])
        self.assertEqual(self.matching_ids(records, [ColumnFilter('vip', 'equals', 'False')]), [2])
        self.assertEqual(self.matching_ids(records, [ColumnFilter('vip', 'in', 'true,false')]), [1, 2])

    def test_boolean_custom_field_with_other_value_is_skipped(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('vip', 'equals', 'maybe')], self.definitions)
        self.assertEqual(len(compiled.skipped), 1)


class SkippedFilterTest(CompilerTestCase):
    """Test that unusable filters are left out instead of failing"""

    def test_unknown_column(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('shoeSize', 'gt', '9')], self.definitions)
        self.assertEqual(len(compiled.skipped), 1)

    def test_operator_does_not_fit_column_type(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('company', 'gt', '5')], self.definitions)
        self.assertEqual(len(compiled.skipped), 1)

    def test_client_column_type_is_ignored(self):
        """A text column sent as "number" still only accepts text operators"""
        column_filter = ColumnFilter('company', 'gt', '5', column_type='number')
        compiled = compile_filters(CONTACTS, OWNER, '', [column_filter], self.definitions)
        self.assertEqual(compiled.skipped, [column_filter])

    def test_empty_value(self):
        compiled = compile_filters(CONTACTS, OWNER, '', [ColumnFilter('company', 'contains', '   ')], self.definitions)
        self.assertEqual(len(compiled.skipped), 1)

    def test_skipped_filter_keeps_the_others(self):
        records = [contact(1, company='Acme'), contact(2, company='Globex')]
        filters = [
            ColumnFilter('company', 'equals', 'acme'),
            ColumnFilter('company', 'between', 'x'),
        ]
        self.assertEqual(self.matching_ids(records, filters), [1])


class OwnershipAndSearchTest(CompilerTestCase):
    """Test owner scoping and free-text search"""

    def setUp(self):
        super().setUp()
        self.records = [
            contact(1, first_name='Ada', email='ada@acme.io'),
            contact(2, first_name='Grace', company='Navy'),
            contact(3, owner=OTHER_OWNER, first_name='Ada'),
        ]

    def test_other_owners_records_never_match(self):
        self.assertEqual(self.matching_ids(self.records), [1, 2])
        self.assertEqual(self.matching_ids(self.records, owner=OTHER_OWNER), [3])

    def test_search_looks_at_name_email_and_company(self):
        self.assertEqual(self.matching_ids(self.records, search='ada'), [1])
        self.assertEqual(self.matching_ids(self.records, search='ACME'), [1])
        self.assertEqual(self.matching_ids(self.records, search='navy'), [2])

    def test_blank_search_is_ignored(self):
        self.assertEqual(self.matching_ids(self.records, search='  '), [1, 2])

    def test_predicate_shape(self):
        compiled = compile_filters(CONTACTS, OWNER, 'ada', [ColumnFilter('company', 'contains', 'x')])
        self.assertIsInstance(compiled.predicate, ex.AllOf)
        owner_condition = compiled.predicate.children[0]
        self.assertEqual(owner_condition, ex.Condition(ex.FieldRef('owner_id', ex.ENUM_KIND), 'exact', OWNER))
        self.assertIsInstance(compiled.predicate.children[1], ex.AnyOf)


class ParsingHelpersTest(SimpleTestCase):

    def test_parse_number(self):
        self.assertEqual(parse_number('12.5'), 12.5)
        self.assertEqual(parse_number(' -3 '), -3.0)
        self.assertEqual(parse_number(7), 7.0)
        self.assertIsNone(parse_number('N/A'))
        self.assertIsNone(parse_number('1e5'))
        self.assertIsNone(parse_number(True))
        self.assertIsNone(parse_number(None))

    def test_parse_filter_date(self):
        self.assertEqual(str(parse_filter_date('2024-03-15')), '2024-03-15')
        self.assertEqual(str(parse_filter_date('2024-03-15T10:30:00Z')), '2024-03-15')
        self.assertIsNone(parse_filter_date('2024-13-01'))
        self.assertIsNone(parse_filter_date(''))
