"""Tests for `openid_select.session` module."""
import unittest

from mock import Mock
from testfixtures import LogCapture

from openid_select.session import (SESSION_NAMESPACE, ContainerStash, LazySessionStash, NativeSessionStash,
                                   SessionStash, stashAll)

VALUES = {'identity': 'http://specs.openid.net/auth/2.0/identifier_select'}


class TestContainerStash(unittest.TestCase):
    """Test `ContainerStash` class."""

    def test_stash(self):
        container = {'other': 'value'}
        self.assertTrue(ContainerStash(container).stash(VALUES))
        self.assertEqual(container, dict(VALUES, other='value'))

    def test_no_container(self):
        self.assertFalse(ContainerStash(None).stash(VALUES))


class TestNativeSessionStash(unittest.TestCase):
    """Test `NativeSessionStash` class."""

    def test_stash(self):
        session = {}
        self.assertTrue(NativeSessionStash(session).stash(VALUES))
        self.assertEqual(session, {SESSION_NAMESPACE: VALUES})

    def test_key(self):
        session = {}
        NativeSessionStash(session, key='openid').stash(VALUES)
        self.assertEqual(session, {'openid': VALUES})

    def test_no_session(self):
        self.assertFalse(NativeSessionStash(None).stash(VALUES))


class TestLazySessionStash(unittest.TestCase):
    """Test `LazySessionStash` class."""

    def test_stash(self):
        stash = LazySessionStash(dict, lambda: False)
        self.assertTrue(stash.stash(VALUES))
        self.assertEqual(stash.container, VALUES)

    def test_headers_sent(self):
        factory = Mock()
        stash = LazySessionStash(factory, lambda: True)
        self.assertFalse(stash.stash(VALUES))
        self.assertIsNone(stash.container)
        factory.assert_not_called()


class TestStashAll(unittest.TestCase):
    """Test `stashAll` function."""

    def test_first_available(self):
        first = {}
        second = {}
        stashes = [ContainerStash(None), ContainerStash(first), ContainerStash(second)]
        self.assertIs(stashAll(stashes, VALUES), stashes[1])
        self.assertEqual(first, VALUES)
        self.assertEqual(second, {})

    def test_none_available(self):
        with LogCapture() as logbook:
            self.assertIsNone(stashAll([ContainerStash(None), NativeSessionStash(None)], VALUES))
        logbook.check(('openid_select.session', 'DEBUG', 'No session available, requested identity not stored'))

    def test_empty(self):
        self.assertIsNone(stashAll([], VALUES))

    def test_interface(self):
        self.assertRaises(NotImplementedError, SessionStash().stash, VALUES)
