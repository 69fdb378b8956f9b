# -*- coding: utf-8 -*-

import unittest

import requests

import osslite
from mock import patch
from osslite import exceptions
from .common import MockResponse, bucket


def make_error_response(status, body=''):
    return MockResponse('''HTTP/1.1 {0} Error
Content-Type: application/xml
x-oss-request-id: 566B6C0A05200A20B174994F

{1}'''.format(status, body))


class TestExceptions(unittest.TestCase):
    def test_make_exception_by_code(self):
        body = '''<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Code>InvalidArgument</Code>
  <Message>Argument is invalid.</Message>
  <ArgumentName>max-keys</ArgumentName>
  <ArgumentValue>-1</ArgumentValue>
</Error>'''

        e = exceptions.make_exception(make_error_response(400, body))

        self.assertTrue(isinstance(e, exceptions.InvalidArgument))
        self.assertEqual(e.status, 400)
        self.assertEqual(e.code, 'InvalidArgument')
        self.assertEqual(e.message, 'Argument is invalid.')
        self.assertEqual(e.name, 'max-keys')
        self.assertEqual(e.value, '-1')
        self.assertEqual(e.request_id, '566B6C0A05200A20B174994F')
        self.assertEqual(e.body, osslite.to_bytes(body))

    def test_make_exception_by_status(self):
        self.assertTrue(isinstance(exceptions.make_exception(make_error_response(404)), exceptions.NotFound))
        self.assertTrue(isinstance(exceptions.make_exception(make_error_response(409)), exceptions.Conflict))
        self.assertTrue(isinstance(exceptions.make_exception(make_error_response(304)), exceptions.NotModified))

        e = exceptions.make_exception(make_error_response(409, '<Error><Code>BucketNotEmpty</Code></Error>'))
        self.assertEqual(type(e), exceptions.ServerError)
        self.assertEqual(e.status, 409)
        self.assertEqual(e.code, 'BucketNotEmpty')

    def test_make_exception_unknown(self):
        body = '<Error><Code>SomethingNew</Code><Message>new</Message></Error>'
        e = exceptions.make_exception(make_error_response(503, body))

        self.assertEqual(type(e), exceptions.ServerError)
        self.assertEqual(e.status, 503)
        self.assertEqual(e.code, 'SomethingNew')

    def test_make_exception_non_xml_body(self):
        e = exceptions.make_exception(make_error_response(502, '<html>Bad Gateway</html>'))

        self.assertEqual(type(e), exceptions.ServerError)
        self.assertEqual(e.details, {})
        self.assertEqual(e.body, b'<html>Bad Gateway</html>')

    def test_make_exception_non_utf8_body(self):
        body = u'<html>服务器错误</html>'.encode('gbk')
        resp = MockResponse(b'HTTP/1.1 502 Bad Gateway\nContent-Type: text/html\n\n' + body)

        e = exceptions.make_exception(resp)

        self.assertEqual(type(e), exceptions.ServerError)
        self.assertEqual(e.status, 502)
        self.assertEqual(e.details, {})
        self.assertEqual(e.body, body)

        body = u'<Error><Code>NoSuchKey</Code><Message>找不到'.encode('utf-8')[:-1]
        resp = MockResponse(b'HTTP/1.1 404 Not Found\n\n' + body)

        e = exceptions.make_exception(resp)
        self.assertEqual(type(e), exceptions.NotFound)
        self.assertEqual(e.body, body)

    @patch('osslite.Session.do_request')
    def test_get_object_non_utf8_error(self, do_request):
        body = u'<html>服务器错误</html>'.encode('gbk')
        do_request.return_value = MockResponse(b'HTTP/1.1 502 Bad Gateway\nContent-Type: text/html\n\n' + body)

        try:
            bucket().get_object('k')
            self.assertTrue(False)
        except exceptions.ServerError as e:
            self.assertEqual(e.status, 502)
            self.assertEqual(e.body, body)

    def test_make_exception_broken_xml(self):
        body = '<Error><Code>NoSuchKey</Code><Message>missing</Message>'
        e = exceptions.make_exception(make_error_response(404, body))

        self.assertEqual(type(e), exceptions.NotFound)

        body = '<Error><Code>NoSuchKey</Code><Message>missing</Message></Error><'
        e = exceptions.make_exception(make_error_response(404, body))

        self.assertTrue(isinstance(e, exceptions.NoSuchKey))
        self.assertEqual(e.message, 'missing')

    def test_str(self):
        e = exceptions.make_exception(make_error_response(404, '<Error><Code>NoSuchKey</Code></Error>'))
        self.assertTrue("'status': 404" in str(e))
        self.assertTrue('566B6C0A05200A20B174994F' in str(e))

    def test_client_errors(self):
        e = exceptions.ClientError('bad argument')
        self.assertEqual(e.status, exceptions.OSS_CLIENT_ERROR_STATUS)
        self.assertEqual(str(e), 'ClientError: bad argument')

        cause = requests.Timeout('timed out')
        e = exceptions.RequestError(cause)
        self.assertEqual(e.status, exceptions.OSS_REQUEST_ERROR_STATUS)
        self.assertTrue(e.exception is cause)
        self.assertEqual(str(e), 'RequestError: timed out')

        e = exceptions.ResponseParseError('bad xml')
        self.assertEqual(e.status, exceptions.OSS_RESPONSE_PARSE_ERROR_STATUS)

        e = exceptions.InconsistentError('crc', request_id='abc')
        self.assertEqual(e.status, exceptions.OSS_INCONSISTENT_ERROR_STATUS)
        self.assertEqual(e.request_id, 'abc')

    def test_hierarchy(self):
        for klass in (exceptions.ClientError, exceptions.RequestError, exceptions.ResponseParseError,
                      exceptions.InconsistentError, exceptions.ServerError):
            self.assertTrue(issubclass(klass, exceptions.OssError))

        self.assertTrue(issubclass(exceptions.NoSuchKey, exceptions.NotFound))
        self.assertTrue(issubclass(exceptions.SignatureDoesNotMatch, exceptions.AccessDenied))


if __name__ == '__main__':
    unittest.main()
