# -*- coding: utf-8 -*-

import random
import string
import unittest
import tempfile
import os
import io
import functools
import re

import xml
from xml.dom import minidom

import osslite

BUCKET_NAME = 'ming-oss-share'
ENDPOINT = 'http://oss-cn-hangzhou.aliyuncs.com'

CHUNK_SIZE = 8192


def random_string(n):
    return ''.join(random.choice(string.ascii_lowercase) for i in range(n))


def random_bytes(n):
    return osslite.to_bytes(random_string(n))


def bucket(**kwargs):
    return osslite.Bucket(osslite.Auth('fake-access-key-id', 'fake-access-key-secret'),
                          ENDPOINT, BUCKET_NAME, **kwargs)


def service():
    return osslite.Service(osslite.Auth('fake-access-key-id', 'fake-access-key-secret'), ENDPOINT)


def async_bucket(**kwargs):
    return osslite.AsyncBucket(osslite.Auth('fake-access-key-id', 'fake-access-key-secret'),
                               ENDPOINT, BUCKET_NAME, **kwargs)


def async_service():
    return osslite.AsyncService(osslite.Auth('fake-access-key-id', 'fake-access-key-secret'), ENDPOINT)


class RequestInfo(object):
    def __init__(self):
        self.req = None
        self.data = None
        self.size = None


def read_file(fileobj):
    result = b''

    while True:
        content = fileobj.read(CHUNK_SIZE)
        if content:
            result += content
        else:
            return result


def calc_crc(data):
    crc = osslite.utils.Crc64()
    crc.update(osslite.to_bytes(data))
    return crc.crc


def _record_request(req, req_info):
    req_info.req = req

    if req.data is None:
        req_info.data = b''
        req_info.size = 0
    elif isinstance(req.data, (str, bytes)):
        req_info.data = osslite.to_bytes(req.data)
        req_info.size = len(req_info.data)
    else:
        req_info.data = read_file(req.data)
        req_info.size = len(req_info.data)


def do4response(req, timeout, req_info=None, payload=None):
    if req_info:
        _record_request(req, req_info)

    return MockResponse(payload)


def do4async_response(req, timeout, req_info=None, payload=None):
    if req_info:
        _record_request(req, req_info)

    resp = MockResponse(payload)
    return osslite.http.AsyncResponse(resp.status, resp.headers, resp.body)


def mock_response(do_request, payload):
    req_info = RequestInfo()

    do_request.auto_spec = True
    do_request.side_effect = functools.partial(do4response, req_info=req_info, payload=payload)

    return req_info


def mock_async_response(do_request, payload):
    req_info = RequestInfo()

    do_request.side_effect = functools.partial(do4async_response, req_info=req_info, payload=payload)

    return req_info


def query_to_params(query):
    params = {}
    for kv_pair in query.split('&'):
        kv = kv_pair.split('=', 1)
        if len(kv) == 2:
            params[kv[0]] = osslite.urlunquote(kv[1])
        else:
            params[kv[0]] = ''

    return params


def head_fields_to_headers(head_fields):
    headers = osslite.CaseInsensitiveDict()
    for header_kv in head_fields:
        kv = header_kv.split(':', 1)
        if len(kv) == 2:
            headers[kv[0].strip()] = kv[1].strip()
        else:
            headers[kv[0].strip()] = ''

    return headers


class MockRequest(object):
    def __init__(self, request_text):
        fields = re.split('\n\n', request_text, 1)
        head_fields = re.split('\n', fields[0])
        request_line_fields = head_fields[0].split()

        uri_query_fields = request_line_fields[1].split('?')
        if len(uri_query_fields) == 2:
            self.params = query_to_params(uri_query_fields[1])
        else:
            self.params = {}

        if len(fields) == 2:
            self.body = osslite.to_bytes(fields[1])
        else:
            self.body = b''

        self.method = request_line_fields[0]
        self.headers = head_fields_to_headers(head_fields[1:])
        self.url = 'http://' + self.headers['host'] + uri_query_fields[0]


class MockResponse(object):
    def __init__(self, response_text):
        if isinstance(response_text, bytes):
            fields = re.split(b'\n\n', response_text, 1)
        else:
            fields = re.split('\n\n', response_text, 1)
        head_fields = re.split('\n', osslite.to_string(fields[0]))
        response_line_fields = head_fields[0].split(' ', 2)

        self.status = int(response_line_fields[1])
        self.headers = head_fields_to_headers(head_fields[1:])
        self.request_id = self.headers.get('x-oss-request-id', '')

        if len(fields) == 2:
            self.body = osslite.to_bytes(fields[1])
        else:
            self.body = b''

        self.__io = io.BytesIO(self.body)
        self.closed = False

    def read(self, amt=None):
        return self.__io.read(amt)

    def close(self):
        self.closed = True

    def __iter__(self):
        return iter(lambda: self.read(CHUNK_SIZE), b'')


def _is_xml(content):
    try:
        minidom.parseString(content)
    except xml.parsers.expat.ExpatError:
        return False
    else:
        return True


class OssTestCase(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(OssTestCase, self).__init__(*args, **kwargs)
        self.default_connect_timeout = osslite.defaults.connect_timeout

    def setUp(self):
        osslite.defaults.connect_timeout = self.default_connect_timeout
        self.temp_files = []

    def tearDown(self):
        for temp_file in self.temp_files:
            if os.path.exists(temp_file):
                os.remove(temp_file)

    def tempname(self):
        fd, pathname = tempfile.mkstemp(suffix='test-download')
        os.close(fd)

        self.temp_files.append(pathname)
        return pathname

    def make_tempfile(self, content, suffix='test-upload'):
        fd, pathname = tempfile.mkstemp(suffix=suffix)

        os.write(fd, osslite.to_bytes(content))
        os.close(fd)

        self.temp_files.append(pathname)
        return pathname

    def assertXmlEqual(self, a, b):
        a = a.translate(None, b'\r\n')
        b = b.translate(None, b'\r\n')

        normalized_a = minidom.parseString(osslite.to_bytes(a)).toxml(encoding='utf-8')
        normalized_b = minidom.parseString(osslite.to_bytes(b)).toxml(encoding='utf-8')

        self.assertEqual(normalized_a, normalized_b)

    def assertRequest(self, req_info, request_text):
        req = req_info.req

        expected = MockRequest(request_text)

        self.assertEqual(req.method, expected.method)
        self.assertEqual(req.url, expected.url)
        self.assertEqual(req.params, expected.params)

        if 'Content-Type' in expected.headers:
            self.assertEqual(req.headers.get('Content-Type'), expected.headers['Content-Type'])

        for k, v in expected.headers.items():
            if k.lower().startswith('x-oss-'):
                self.assertEqual(req.headers.get(k), expected.headers[k])

        self.assertTrue(req.headers['authorization'].startswith('OSS fake-access-key-id:'))

        if _is_xml(expected.body):
            self.assertXmlEqual(req_info.data, expected.body)
        else:
            self.assertEqual(req_info.data, expected.body)


class AsyncOssTestCase(unittest.IsolatedAsyncioTestCase, OssTestCase):
    pass
