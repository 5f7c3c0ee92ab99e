import unittest
from packy.events.Event_Bus import STATE_CHANGED, STATE_RESET, STATE_UNDONE
from packy.events.web_observers import ChangeFeed
from packy.state.State_Store import Store


class TestChangeFeed(unittest.TestCase):

    def setUp(self):
        self.store = Store()
        self.feed = ChangeFeed().start(self.store.events)

    def test_records_store_events(self):
        self.store.set_state({'currentList': {'trip': {'name': 'Paris'}, 'items': [
            {'id': 'a', 'packed': True}, {'id': 'b', 'packed': False},
        ]}})
        self.store.undo()
        self.store.reset()

        events = self.feed.get_events()['events']
        self.assertEqual([e['type'] for e in events], [STATE_CHANGED, STATE_UNDONE, STATE_RESET])
        first = events[0]
        self.assertEqual((first['trip'], first['items'], first['packed']), ('Paris', 2, 1))
        self.assertIsNotNone(first['modifiedAt'])
        self.assertIsNone(events[1]['trip'])

    def test_cursor(self):
        self.store.set_state({'templates': []})
        cursor = self.feed.get_events()['next_cursor']
        self.store.set_state({'templates': []})
        newer = self.feed.get_events(since=cursor)
        self.assertEqual(len(newer['events']), 1)
        self.assertEqual(newer['next_cursor'], cursor + 1)
        self.assertEqual(self.feed.get_events(since=newer['next_cursor'])['events'], [])

    def test_start_is_idempotent_and_stop_detaches(self):
        self.feed.start(self.store.events)
        self.store.set_state({'templates': []})
        self.assertEqual(len(self.feed.get_events()['events']), 1)
        self.feed.stop()
        self.store.set_state({'templates': []})
        self.assertEqual(len(self.feed.get_events()['events']), 1)

    def test_buffer_is_capped(self):
        store = Store()
        feed = ChangeFeed(max_events=5).start(store.events)
        for _ in range(8):
            store.set_state({'templates': []})
        events = feed.get_events()['events']
        self.assertEqual(len(events), 5)
        self.assertEqual(events[0]['id'], 4)


if __name__ == '__main__':
    unittest.main()
