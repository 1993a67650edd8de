"""
Tests for object id decoding and line parsing.
"""

import unittest

from geo_hierarchy.entry_parser import EntryParser, decode_object_id, split_line
from geo_hierarchy.exceptions import BadIdError, BadPayloadError

from .fixtures import address_payload


class TestDecodeObjectId(unittest.TestCase):

    def test_positive_id(self):
        self.assertEqual(decode_object_id('100'), 100)
        self.assertEqual(decode_object_id('+5'), 5)

    def test_negative_ids_wrap_to_unsigned(self):
        self.assertEqual(decode_object_id('-1'), (1 << 64) - 1)
        self.assertEqual(decode_object_id('-9223372036854775808'), 1 << 63)

    def test_signed_maximum(self):
        self.assertEqual(decode_object_id('9223372036854775807'), (1 << 63) - 1)

    def test_unsigned_only_values_are_rejected(self):
        # Valid as unsigned 64-bit, but not as the signed form ids are written in
        for token in ('9223372036854775808', '18446744073709551615'):
            with self.assertRaises(BadIdError) as ctx:
                decode_object_id(token)
            self.assertEqual(ctx.exception.reason, 'out_of_range')

    def test_below_signed_minimum(self):
        with self.assertRaises(BadIdError):
            decode_object_id('-9223372036854775809')

    def test_very_long_ids_are_out_of_range(self):
        for token in ('9' * 5000, '-' + '1' * 20, '+' + '7' * 4301):
            with self.assertRaises(BadIdError, msg=token[:8]) as ctx:
                decode_object_id(token)
            self.assertEqual(ctx.exception.reason, 'out_of_range')

    def test_leading_zeros_are_ignored(self):
        self.assertEqual(decode_object_id('0' * 5000 + '42'), 42)
        self.assertEqual(decode_object_id('-' + '0' * 30 + '1'), (1 << 64) - 1)
        self.assertEqual(decode_object_id('0' * 5000), 0)

    def test_non_decimal_tokens(self):
        for token in ('', 'notanumber', '1_000', '0x10', '12.5', '١٢', '--1'):
            with self.assertRaises(BadIdError, msg=token):
                decode_object_id(token)


class TestSplitLine(unittest.TestCase):

    def test_splits_at_first_space(self):
        self.assertEqual(split_line('1 {"a": "b c"}'), ('1', '{"a": "b c"}'))

    def test_tab_separator(self):
        self.assertEqual(split_line('1\t{}'), ('1', '{}'))

    def test_other_unicode_whitespace_is_not_a_separator(self):
        for line in ('1\u00a0{}', '1\u2003{}', '1\x1f{}'):
            with self.assertRaises(BadIdError, msg=repr(line)) as ctx:
                split_line(line)
            self.assertEqual(ctx.exception.reason, 'missing_separator')

    def test_missing_separator(self):
        with self.assertRaises(BadIdError) as ctx:
            split_line('garbage')
        self.assertEqual(ctx.exception.reason, 'missing_separator')
        self.assertEqual(ctx.exception.line, 'garbage')


class TestEntryParser(unittest.TestCase):

    def setUp(self):
        self.parser = EntryParser(name_match_threshold=90)

    def test_explicit_type(self):
        osm_id, entry = self.parser.parse('100 {"type":"A"}')
        self.assertEqual(osm_id, 100)
        self.assertEqual(entry.osm_id, 100)
        self.assertEqual(entry.type, 'A')
        self.assertEqual(entry.name, '')

    def test_bad_id(self):
        with self.assertRaises(BadIdError):
            self.parser.parse('notanumber {}')

    def test_negative_id_line(self):
        osm_id, entry = self.parser.parse('-2 {"type":"street"}')
        self.assertEqual(osm_id, (1 << 64) - 2)
        self.assertEqual(entry.osm_id, osm_id)

    def test_sentinel_type_is_dropped(self):
        self.assertIsNone(self.parser.parse('7 {"type":"count"}'))
        self.assertIsNone(self.parser.parse('7 {"type":"Count"}'))

    def test_payload_without_address_is_sentinel(self):
        self.assertIsNone(self.parser.parse('7 {"properties": {"name": "Nowhere"}}'))
        self.assertIsNone(self.parser.parse('7 {}'))

    def test_type_from_most_specific_level(self):
        payload = address_payload({'country': 'Russia', 'region': 'Moscow Oblast',
                                   'locality': 'Moscow'}, name='Moscow')
        osm_id, entry = self.parser.parse(f'42 {payload}')
        self.assertEqual(entry.type, 'locality')
        self.assertEqual(entry.name, 'Moscow')
        self.assertEqual(entry.address['country'], 'Russia')
        self.assertEqual(entry.get_hierarchical_path()[0], ('country', 'Russia'))

    def test_fallback_to_flat_properties(self):
        line = '5 {"properties": {"name": "Main St", "address": {"street": "Main St", "locality": "Town"}}}'
        _, entry = self.parser.parse(line)
        self.assertEqual(entry.type, 'street')
        self.assertEqual(entry.name, 'Main St')
        self.assertEqual(entry.address, {'locality': 'Town', 'street': 'Main St'})

    def test_explicit_type_wins_over_address(self):
        line = '5 {"type": "poi", "properties": {"address": {"street": "Main St"}}}'
        _, entry = self.parser.parse(line)
        self.assertEqual(entry.type, 'poi')

    def test_non_string_address_values_are_ignored(self):
        line = '5 {"properties": {"address": {"street": {"x": 1}, "locality": "Town"}}}'
        _, entry = self.parser.parse(line)
        self.assertEqual(entry.type, 'locality')

    def test_bad_payloads(self):
        cases = {
            '1 {"properties": ': 'invalid_json',
            '1 ': 'invalid_json',
            '1 [1, 2]': 'not_an_object',
            '1 {"type": 5}': 'bad_type',
            '1 {"properties": [1]}': 'bad_properties',
        }
        for line, reason in cases.items():
            with self.assertRaises(BadPayloadError, msg=line) as ctx:
                self.parser.parse(line)
            self.assertEqual(ctx.exception.reason, reason)

    def test_name_mismatch(self):
        payload = address_payload({'locality': 'Moscow'}, name='Tverskaya Street')
        _, entry = self.parser.parse(f'1 {payload}')
        self.assertTrue(self.parser.is_name_mismatched(entry))

    def test_name_match_ignores_case_and_punctuation(self):
        payload = address_payload({'locality': 'Saint-Petersburg'}, name='saint petersburg')
        _, entry = self.parser.parse(f'1 {payload}')
        self.assertFalse(self.parser.is_name_mismatched(entry))

    def test_entry_without_name_never_mismatches(self):
        payload = address_payload({'locality': 'Moscow'})
        _, entry = self.parser.parse(f'1 {payload}')
        self.assertFalse(self.parser.is_name_mismatched(entry))


if __name__ == '__main__':
    unittest.main()
