"""Tests for `openid_select.extensions.sreg` module."""
import unittest

from openid_select.constants import OPENID2_NS
from openid_select.extensions import sreg


class CheckFieldNameTest(unittest.TestCase):
    def test_goodNamePasses(self):
        for field_name in sreg.data_fields:
            sreg.checkFieldName(field_name)

    def test_badNameFails(self):
        self.assertRaises(ValueError, sreg.checkFieldName, 'INVALID')

    def test_badTypeFails(self):
        self.assertRaises(ValueError, sreg.checkFieldName, None)


class SRegRequestTest(unittest.TestCase):
    """Test `SRegRequest` class."""

    def test_openid2(self):
        params = {'openid.ns': OPENID2_NS}
        request = sreg.SRegRequest(required=['email'], optional=['nickname', 'fullname'],
                                   policy_url='http://rp.example/policy')
        self.assertTrue(request.prepareRequest(params))
        self.assertEqual(params, {
            'openid.ns': OPENID2_NS,
            'openid.ns.sreg': 'http://openid.net/extensions/sreg/1.1',
            'openid.sreg.required': 'email',
            'openid.sreg.optional': 'nickname,fullname',
            'openid.sreg.policy_url': 'http://rp.example/policy',
        })

    def test_openid1(self):
        params = {}
        self.assertTrue(sreg.SRegRequest(optional=['email']).prepareRequest(params))
        self.assertEqual(params, {'openid.sreg.optional': 'email'})

    def test_empty(self):
        params = {'openid.ns': OPENID2_NS}
        self.assertTrue(sreg.SRegRequest().prepareRequest(params))
        self.assertEqual(params, {'openid.ns': OPENID2_NS, 'openid.ns.sreg': sreg.ns_uri})

    def test_invalid_field(self):
        params = {'openid.ns': OPENID2_NS}
        self.assertFalse(sreg.SRegRequest(required=['email', 'shoe_size']).prepareRequest(params))
        self.assertEqual(params, {'openid.ns': OPENID2_NS})
