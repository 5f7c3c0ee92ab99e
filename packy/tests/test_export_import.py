import json
import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path

from packy.utilities.export_import import (
    DataExporter,
    DataImporter,
    generate_filename,
    slugify,
    template_filename,
)
from packy.utilities.validators import ImportValidationError


def _document():
    return {
        'meta': {'version': '1.0.0'},
        'trip': {'name': 'Summer in Crete!', 'departureDate': '2025-07-01', 'returnDate': '2025-07-08'},
        'bags': [{'id': 'b1', 'name': 'Bag'}],
        'categories': [{'id': 'c1', 'name': 'Beach'}],
        'items': [{'id': 'i1', 'name': 'Towel', 'categoryId': 'c1', 'quantityType': 'single', 'packed': True}],
        'stages': [],
    }


class TestFilenames(unittest.TestCase):

    def test_slugify(self):
        self.assertEqual(slugify('Summer in Crete!'), 'summer-in-crete')
        self.assertEqual(slugify('  --Ski  Trip 2025-- '), 'ski-trip-2025')

    def test_generate_filename(self):
        today = date(2025, 6, 1)
        self.assertEqual(generate_filename({'name': 'Summer in Crete!'}, today),
                         'packy-summer-in-crete-2025-06-01.json')
        self.assertEqual(generate_filename(None, today), 'packy-packing-list-2025-06-01.json')
        self.assertEqual(generate_filename({'name': ''}, today), 'packy-packing-list-2025-06-01.json')

    def test_template_filename(self):
        self.assertEqual(template_filename('Beach Week'), 'packy-template-beach-week.json')


class TestExportImport(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_export_then_read(self):
        path = DataExporter(self.tmp).export_list(_document(), 'trip.json')
        self.assertEqual(path, self.tmp / 'trip.json')
        self.assertEqual(DataImporter().read_list(path), _document())

    def test_export_uses_trip_filename(self):
        path = DataExporter(self.tmp / 'nested').export_list(_document())
        self.assertTrue(path.name.startswith('packy-summer-in-crete-'))
        self.assertTrue(path.exists())

    def test_export_as_template(self):
        path = DataExporter(self.tmp).export_as_template(_document(), 'Beach Week', 'sun')
        self.assertEqual(path.name, 'packy-template-beach-week.json')
        template = json.loads(path.read_text(encoding='utf-8'))
        self.assertNotIn('trip', template)
        self.assertTrue(template['meta']['isTemplate'])
        self.assertFalse(template['items'][0]['packed'])

    def test_invalid_json(self):
        path = self.tmp / 'broken.json'
        path.write_text('{"meta": ', encoding='utf-8')
        with self.assertRaises(ImportValidationError) as ctx:
            DataImporter().read_list(path)
        self.assertEqual(ctx.exception.errors, ['Invalid JSON file'])

    def test_invalid_structure(self):
        document = _document()
        del document['items']
        path = self.tmp / 'no-items.json'
        path.write_text(json.dumps(document), encoding='utf-8')
        with self.assertRaises(ImportValidationError) as ctx:
            DataImporter().read_list(path)
        self.assertIn('Missing required field: items', ctx.exception.errors)


if __name__ == '__main__':
    unittest.main()
