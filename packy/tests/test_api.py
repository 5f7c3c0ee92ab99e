import unittest
from fastapi.testclient import TestClient
from packy.api.api_run import create_app

TRIP = {'name': 'Alps', 'departureDate': '2025-02-01', 'returnDate': '2025-02-05'}


class TestListApi(unittest.TestCase):

    def setUp(self):
        # fresh app (and store) per test
        self.client = TestClient(create_app())

    def _create(self, template_id='weekend-getaway'):
        resp = self.client.post('/api/lists', json={'templateId': template_id, 'trip': TRIP})
        self.assertEqual(resp.status_code, 201)
        return resp.json()

    def test_templates(self):
        resp = self.client.get('/api/templates')
        self.assertEqual(resp.status_code, 200)
        ids = [t['id'] for t in resp.json()['templates']]
        self.assertIn('weekend-getaway', ids)

    def test_template_listing_leaves_history_alone(self):
        self._create()
        history = self.client.get('/api/state').json()['historySize']
        for _ in range(3):
            self.assertEqual(self.client.get('/api/templates').status_code, 200)
        state = self.client.get('/api/state').json()
        self.assertEqual(state['historySize'], history)
        self.assertEqual(state['templates'], [])

    def test_no_list_is_conflict(self):
        self.assertEqual(self.client.get('/api/lists/current').status_code, 409)
        self.assertEqual(self.client.post('/api/bags', json={'name': 'Duffel'}).status_code, 409)

    def test_create_from_template_and_state(self):
        document = self._create()
        self.assertEqual(document['trip']['calculatedDays'], 5)
        state = self.client.get('/api/state').json()
        self.assertEqual(state['currentList']['meta']['sourceTemplate'], 'weekend-getaway')
        self.assertTrue(state['canUndo'])

    def test_create_empty_list(self):
        resp = self.client.post('/api/lists', json={'trip': TRIP})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['items'], [])

    def test_unknown_template(self):
        resp = self.client.post('/api/lists', json={'templateId': 'nope', 'trip': TRIP})
        self.assertEqual(resp.status_code, 404)

    def test_invalid_trip_range(self):
        trip = {**TRIP, 'returnDate': '2025-01-01'}
        self.assertEqual(self.client.post('/api/lists', json={'trip': trip}).status_code, 422)

    def test_item_crud_and_undo(self):
        document = self._create()
        category_id = document['categories'][0]['id']
        resp = self.client.post('/api/items', json={
            'name': 'Gloves', 'categoryId': category_id, 'quantityType': 'fixed', 'quantity': 2,
        })
        self.assertEqual(resp.status_code, 201)
        item_id = resp.json()['id']

        self.assertEqual(self.client.post(f'/api/items/{item_id}/toggle').status_code, 200)
        items = self.client.get('/api/lists/current').json()['items']
        self.assertTrue(next(i for i in items if i['id'] == item_id)['packed'])

        self.assertTrue(self.client.post('/api/undo').json()['undone'])
        items = self.client.get('/api/lists/current').json()['items']
        self.assertFalse(next(i for i in items if i['id'] == item_id)['packed'])

        self.assertEqual(self.client.delete(f'/api/items/{item_id}').status_code, 200)
        self.assertEqual(self.client.delete(f'/api/items/{item_id}').status_code, 404)

    def test_item_reorder_endpoint(self):
        document = self._create()
        clothing = [i for i in document['items'] if i['categoryId'] == document['categories'][0]['id']]
        first, last = clothing[0]['id'], clothing[-1]['id']
        resp = self.client.post(f'/api/items/{last}/reorder', json={'targetId': first, 'position': 'before'})
        self.assertEqual(resp.json(), {'moved': True})
        resp = self.client.post(f'/api/items/{last}/reorder', json={'targetId': last, 'position': 'after'})
        self.assertEqual(resp.json(), {'moved': False})
        resp = self.client.post(f'/api/items/{last}/reorder', json={'targetId': first, 'position': 'inside'})
        self.assertEqual(resp.status_code, 422)

    def test_invalid_expression_rejected(self):
        document = self._create()
        resp = self.client.post('/api/items', json={
            'name': 'Socks', 'categoryId': document['categories'][0]['id'],
            'quantityType': 'dependent', 'quantityExpression': 'd++',
        })
        self.assertEqual(resp.status_code, 422)

    def test_bag_delete_cascades(self):
        document = self._create()
        bag_id = document['bags'][0]['id']
        self.assertEqual(self.client.delete(f'/api/bags/{bag_id}').status_code, 200)
        current = self.client.get('/api/lists/current').json()
        self.assertNotIn(bag_id, [c['defaultBagId'] for c in current['categories']])
        self.assertNotIn(bag_id, [i['bagId'] for i in current['items']])

    def test_trip_patch(self):
        self._create()
        resp = self.client.patch('/api/trip', json={'field': 'returnDate', 'value': '2025-02-10'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['calculatedDays'], 10)
        resp = self.client.patch('/api/trip', json={'field': 'returnDate', 'value': 'soon'})
        self.assertEqual(resp.status_code, 422)

    def test_stage_and_task_endpoints(self):
        document = self._create()
        stage_id = document['stages'][0]['id']
        resp = self.client.post(f'/api/stages/{stage_id}/tasks', json={'description': 'Wax skis'})
        self.assertEqual(resp.status_code, 201)
        task_id = resp.json()['id']
        self.assertEqual(self.client.post(f'/api/stages/{stage_id}/tasks/{task_id}/toggle').status_code, 200)
        progress = self.client.get('/api/progress').json()
        stage = next(s for s in progress['stages'] if s['stageId'] == stage_id)
        self.assertEqual(stage['progress'], 33)
        self.assertEqual(self.client.post('/api/stages/missing/tasks', json={'description': 'x'}).status_code, 404)


class TestImportExportApi(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(create_app())

    def test_export_and_reimport(self):
        self.client.post('/api/lists', json={'templateId': 'business-trip', 'trip': TRIP})
        resp = self.client.get('/api/lists/export')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('packy-alps-', resp.headers['content-disposition'])
        exported = resp.json()

        self.client.delete('/api/lists/current')
        resp = self.client.post('/api/lists/import', json=exported)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()['items']), len(exported['items']))

    def test_import_rejected(self):
        resp = self.client.post('/api/lists/import', json={'meta': {}, 'bags': [], 'categories': []})
        self.assertEqual(resp.status_code, 422)
        self.assertIn('Missing required field: items', resp.json()['errors'])
        self.assertIsNone(self.client.get('/api/state').json()['currentList'])

    def test_pdf_export(self):
        self.client.post('/api/lists', json={'templateId': 'weekend-getaway', 'trip': TRIP})
        resp = self.client.get('/api/lists/export/pdf')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers['content-type'], 'application/pdf')
        self.assertTrue(resp.content.startswith(b'%PDF'))

    def test_save_template(self):
        self.client.post('/api/lists', json={'templateId': 'weekend-getaway', 'trip': TRIP})
        resp = self.client.post('/api/lists/save-template', json={'templateName': 'Ski Week'})
        self.assertEqual(resp.status_code, 200)
        self.assertIn('packy-template-ski-week.json', resp.headers['content-disposition'])
        self.assertTrue(resp.json()['meta']['isTemplate'])


class TestMiscApi(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(create_app())

    def test_expression_validate(self):
        resp = self.client.post('/api/expression/validate', json={'expression': '2d+1', 'days': 5})
        data = resp.json()
        self.assertTrue(data['valid'])
        self.assertEqual(data['quantity'], 11)
        self.assertEqual(data['example'], '2d+1 = 11 (for 5 days)')
        data = self.client.post('/api/expression/validate', json={'expression': 'd++'}).json()
        self.assertFalse(data['valid'])

    def test_undo_with_empty_history(self):
        self.assertEqual(self.client.post('/api/undo').json(), {'undone': False, 'canUndo': False})

    def test_events_feed(self):
        self.client.post('/api/lists', json={'trip': TRIP})
        data = self.client.get('/api/events').json()
        self.assertEqual(data['events'][-1]['trip'], 'Alps')
        later = self.client.get('/api/events', params={'since': data['next_cursor']}).json()
        self.assertEqual(later['events'], [])

    def test_navigate(self):
        resp = self.client.post('/api/ui/navigate', json={'view': 'templates'})
        self.assertEqual(resp.json()['currentView'], 'templates')
        self.assertEqual(self.client.post('/api/ui/navigate', json={'view': 'nowhere'}).status_code, 422)


if __name__ == '__main__':
    unittest.main()
