import unittest
from packy.events.Event_Bus import EventBus, STATE_CHANGED
from packy.state.State_Store import Store, initial_state


def _document(name="Trip"):
    return {
        'meta': {'version': '1.0.0'},
        'trip': {'name': name},
        'bags': [],
        'categories': [],
        'items': [],
        'stages': [],
    }


class TestStoreState(unittest.TestCase):

    def setUp(self):
        self.store = Store()

    def test_initial_state(self):
        state = self.store.get_state()
        self.assertIsNone(state['currentList'])
        self.assertEqual(state['ui']['currentView'], 'my-lists')
        self.assertEqual(state['templates'], [])
        self.assertFalse(self.store.can_undo())

    def test_get_state_returns_isolated_copy(self):
        self.store.set_state({'currentList': _document()})
        state = self.store.get_state()
        state['currentList']['trip']['name'] = 'Changed'
        state['ui']['currentView'] = 'settings'
        fresh = self.store.get_state()
        self.assertEqual(fresh['currentList']['trip']['name'], 'Trip')
        self.assertEqual(fresh['ui']['currentView'], 'my-lists')

    def test_fragment_is_copied_on_write(self):
        document = _document()
        self.store.set_state({'currentList': document})
        document['trip']['name'] = 'Mutated later'
        self.assertEqual(self.store.get_state()['currentList']['trip']['name'], 'Trip')

    def test_callable_update_receives_current_state(self):
        self.store.set_state({'templates': [{'id': 'a'}]})
        self.store.set_state(lambda state: {'templates': state['templates'] + [{'id': 'b'}]})
        self.assertEqual([t['id'] for t in self.store.get_state()['templates']], ['a', 'b'])

    def test_non_dict_update_rejected(self):
        with self.assertRaises(TypeError):
            self.store.set_state(lambda state: None)
        self.assertEqual(self.store.history_size, 0)

    def test_modified_at_refreshed(self):
        self.store.set_state({'currentList': _document()})
        self.assertIn('modifiedAt', self.store.get_state()['currentList']['meta'])

    def test_select(self):
        self.store.set_state({'currentList': _document('Lisbon')})
        self.assertEqual(self.store.select(lambda s: s['currentList']['trip']['name']), 'Lisbon')


class TestStoreUndo(unittest.TestCase):

    def setUp(self):
        self.store = Store()

    def test_undo_empty_history(self):
        before = self.store.get_state()
        self.assertFalse(self.store.undo())
        self.assertEqual(self.store.get_state(), before)

    def test_undo_restores_previous_document(self):
        self.store.set_state({'currentList': _document('First')})
        before = self.store.get_state()['currentList']
        self.store.set_state(lambda s: {'currentList': {**s['currentList'], 'trip': {'name': 'Second'}}})
        self.assertTrue(self.store.undo())
        self.assertEqual(self.store.get_state()['currentList'], before)

    def test_undo_depths_up_to_limit(self):
        for depth in range(1, 51):
            with self.subTest(depth=depth):
                store = Store()
                store.set_state({'currentList': _document('start')})
                snapshots = []
                for step in range(depth):
                    snapshots.append(store.get_state()['currentList'])
                    store.set_state(lambda s, step=step: {
                        'currentList': {**s['currentList'], 'trip': {'name': f'step-{step}'}}
                    })
                for expected in reversed(snapshots):
                    self.assertTrue(store.undo())
                    self.assertEqual(store.get_state()['currentList'], expected)

    def test_history_is_capped(self):
        for idx in range(60):
            self.store.set_state({'templates': [{'id': str(idx)}]})
        self.assertEqual(self.store.history_size, 50)
        undone = 0
        while self.store.undo():
            undone += 1
        self.assertEqual(undone, 50)
        # the ten oldest snapshots were evicted
        self.assertEqual(self.store.get_state()['templates'], [{'id': '9'}])

    def test_custom_history_limit(self):
        store = Store(history_limit=3)
        for idx in range(5):
            store.set_state({'templates': [{'id': str(idx)}]})
        self.assertEqual(store.history_size, 3)
        with self.assertRaises(ValueError):
            Store(history_limit=0)

    def test_undo_keeps_ui(self):
        self.store.set_state({'currentList': _document()})
        self.store.set_state(lambda s: {'ui': {**s['ui'], 'currentView': 'settings'}})
        self.store.undo()
        state = self.store.get_state()
        self.assertEqual(state['ui']['currentView'], 'settings')
        self.assertIsNotNone(state['currentList'])

    def test_reset(self):
        self.store.set_state({'currentList': _document()})
        self.store.reset()
        self.assertEqual(self.store.get_state(), initial_state())
        self.assertFalse(self.store.can_undo())


class TestStoreSubscribers(unittest.TestCase):

    def setUp(self):
        self.store = Store()

    def test_subscriber_receives_new_state(self):
        seen = []
        self.store.subscribe(seen.append)
        self.store.set_state({'templates': [{'id': 'a'}]})
        self.store.undo()
        self.assertEqual(len(seen), 2)
        self.assertEqual(seen[0]['templates'], [{'id': 'a'}])
        self.assertEqual(seen[1]['templates'], [])

    def test_unsubscribe(self):
        seen = []
        unsubscribe = self.store.subscribe(seen.append)
        unsubscribe()
        self.store.set_state({'templates': []})
        self.assertEqual(seen, [])

    def test_failing_subscriber_does_not_block_others(self):
        seen = []

        def broken(state):
            raise RuntimeError("boom")

        self.store.subscribe(broken)
        self.store.subscribe(seen.append)
        with self.assertLogs('packy.events.Event_Bus', level='ERROR'):
            self.store.set_state({'templates': []})
        self.assertEqual(len(seen), 1)
        self.assertEqual(self.store.history_size, 1)

    def test_shared_event_bus(self):
        bus = EventBus()
        store = Store(event_bus=bus)
        events = []
        bus.subscribe(STATE_CHANGED, lambda name, payload: events.append(name))
        store.set_state({'templates': []})
        self.assertEqual(events, [STATE_CHANGED])
        self.assertIs(store.events, bus)

    def test_debug_snapshot(self):
        self.store.subscribe(lambda state: None)
        self.assertEqual(self.store.events.subscriber_count(STATE_CHANGED), 1)
        self.store.set_state({'templates': []})
        info = self.store.debug()
        self.assertEqual((info['historyLength'], info['listenerCount']), (1, 1))


if __name__ == '__main__':
    unittest.main()
