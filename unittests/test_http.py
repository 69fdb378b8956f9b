# -*- coding: utf-8 -*-

import io
import unittest

import requests
from mock import MagicMock, patch

import osslite
from osslite.exceptions import RequestError
from osslite.http import Request, Response, AsyncResponse, SizedFileAdapter, USER_AGENT
from .common import bucket


class TestHttp(unittest.TestCase):
    def test_request_defaults(self):
        req = Request('GET', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key')

        self.assertEqual(req.params, {})
        self.assertEqual(req.data, None)
        self.assertTrue('Accept-Encoding' in req.headers)
        self.assertEqual(req.headers['Accept-Encoding'], None)
        self.assertEqual(req.headers['user-agent'], USER_AGENT)
        self.assertTrue(USER_AGENT.startswith('osslite-python/' + osslite.__version__))

    def test_request_app_name(self):
        req = Request('GET', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key', app_name='my-app')
        self.assertEqual(req.headers['User-Agent'], USER_AGENT + '/my-app')

        req = Request('GET', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key', headers={'User-Agent': 'custom'})
        self.assertEqual(req.headers['User-Agent'], 'custom')

    def test_full_url(self):
        req = Request('GET', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key')
        self.assertEqual(req.full_url(), 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key')

        req = Request('POST', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key', params={'uploads': ''})
        self.assertEqual(req.full_url(), 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key?uploads')

        req = Request('PUT', 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key',
                      params={'partNumber': '1', 'uploadId': 'a+b'})
        self.assertEqual(req.full_url(), 'http://bucket.oss-cn-hangzhou.aliyuncs.com/key?partNumber=1&uploadId=a%2Bb')

    def test_request_body(self):
        self.assertEqual(Request('PUT', 'http://127.0.0.1/', data=u'中文').data, u'中文'.encode('utf-8'))

        fileobj = io.BytesIO(b'0123456789')
        fileobj.read(4)

        data = Request('PUT', 'http://127.0.0.1/', data=fileobj).data
        self.assertTrue(isinstance(data, SizedFileAdapter))
        self.assertEqual(data.len, 6)
        self.assertEqual(data.read(2), b'45')
        self.assertEqual(data.read(), b'6789')
        self.assertEqual(data.read(), b'')

    def test_response(self):
        requests_response = MagicMock()
        requests_response.status_code = 200
        requests_response.headers = osslite.CaseInsensitiveDict({'x-oss-request-id': 'req-id'})
        requests_response.iter_content.side_effect = lambda size: iter([b'abc', b'def'])

        resp = Response(requests_response)

        self.assertEqual(resp.status, 200)
        self.assertEqual(resp.request_id, 'req-id')
        self.assertEqual(resp.read(), b'abcdef')
        self.assertEqual(resp.read(3), b'abc')

        resp.close()
        requests_response.close.assert_called_once_with()

    def test_response_broken_body(self):
        def iter_content(size):
            yield b'<?xml version="1.0" encoding="UTF-8"?>'
            raise requests.exceptions.ChunkedEncodingError('Connection broken: IncompleteRead')

        requests_response = MagicMock()
        requests_response.status_code = 200
        requests_response.headers = osslite.CaseInsensitiveDict({'x-oss-request-id': 'req-id',
                                                                  'Content-Length': '100000'})
        requests_response.iter_content.side_effect = iter_content

        self.assertRaises(RequestError, Response(requests_response).read)
        self.assertRaises(RequestError, b''.join, Response(requests_response))

        requests_response.iter_content.side_effect = requests.exceptions.ConnectionError('reset')
        self.assertRaises(RequestError, Response(requests_response).read, 10)

    @patch('osslite.Session.do_request')
    def test_list_objects_broken_body(self, do_request):
        def iter_content(size):
            yield b'<?xml version="1.0" encoding="UTF-8"?><ListBucketResult>'
            raise requests.exceptions.ChunkedEncodingError('Connection broken: IncompleteRead')

        requests_response = MagicMock()
        requests_response.status_code = 200
        requests_response.headers = osslite.CaseInsensitiveDict({'Content-Type': 'application/xml'})
        requests_response.iter_content.side_effect = iter_content
        do_request.return_value = Response(requests_response)

        try:
            bucket().list_objects()
            self.assertTrue(False)
        except RequestError as e:
            self.assertEqual(e.status, osslite.exceptions.OSS_REQUEST_ERROR_STATUS)
            self.assertTrue(isinstance(e.exception, requests.exceptions.ChunkedEncodingError))

    def test_async_response(self):
        resp = AsyncResponse(206, {'X-OSS-Request-Id': 'req-id', 'Content-Length': '6'}, b'abcdef')

        self.assertEqual(resp.status, 206)
        self.assertEqual(resp.request_id, 'req-id')
        self.assertEqual(resp.headers['content-length'], '6')
        self.assertEqual(resp.read(2), b'ab')
        self.assertEqual(b''.join(resp), b'cdef')
        self.assertEqual(resp.read(), b'')

    def test_session_pool_size(self):
        session = osslite.Session(pool_size=3)
        adapter = session.session.get_adapter('http://oss-cn-hangzhou.aliyuncs.com')
        self.assertEqual(adapter._pool_connections, 3)
        self.assertEqual(adapter._pool_maxsize, 3)
        session.close()

        session = osslite.AsyncSession()
        self.assertEqual(session.pool_size, osslite.defaults.connection_pool_size)
        self.assertEqual(session.session, None)


if __name__ == '__main__':
    unittest.main()
