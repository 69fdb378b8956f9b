# -*- coding: utf-8 -*-

import osslite
from osslite import to_string
from mock import patch

from unittests.common import *


class TestMultipart(OssTestCase):
    @patch('osslite.Session.do_request')
    def test_init(self, do_request):
        request_text = '''POST /uosvelkvcqm.txt?uploads HTTP/1.1
Host: ming-oss-share.oss-cn-hangzhou.aliyuncs.com
Accept-Encoding: identity
Connection: keep-alive
Content-Length: 0
Content-Type: text/plain
date: Sat, 12 Dec 2015 00:36:26 GMT
Accept: */*
authorization: OSS fake-access-key-id:1XAyyb8s1ojD5kP8CpAqYCLe/qg='''

        response_text = '''HTTP/1.1 200 OK
Server: AliyunOSS
Date: Sat, 12 Dec 2015 00:36:26 GMT
Content-Type: application/xml
Content-Length: 234
Connection: keep-alive
x-oss-request-id: 566B6C0A05200A20B174994F

<?xml version="1.0" encoding="UTF-8"?>
<InitiateMultipartUploadResult>
  <Bucket>ming-oss-share</Bucket>
  <Key>uosvelkvcqm.txt</Key>
  <UploadId>D2DDC3E4A3C447DE8CAA08C2B0B6FFBA</UploadId>
</InitiateMultipartUploadResult>'''

        req_info = mock_response(do_request, response_text)
        result = bucket().init_multipart_upload('uosvelkvcqm.txt')

        self.assertRequest(req_info, request_text)

        self.assertEqual(result.request_id, '566B6C0A05200A20B174994F')
        self.assertEqual(result.bucket, 'ming-oss-share')
        self.assertEqual(result.key, 'uosvelkvcqm.txt')
        self.assertEqual(result.upload_id, 'D2DDC3E4A3C447DE8CAA08C2B0B6FFBA')

    @patch('osslite.Session.do_request')
    def test_upload_part(self, do_request):
        content = random_bytes(1024)

        request_text = '''PUT /tmpuploadpart?partNumber=3&uploadId=41337E94168A4E6F918C3D6CAAFADCCD HTTP/1.1
Host: ming-oss-share.oss-cn-hangzhou.aliyuncs.com
Accept-Encoding: identity
Connection: keep-alive
Content-Length: 1024
date: Sat, 12 Dec 2015 00:36:25 GMT
Accept: */*
authorization: OSS fake-access-key-id:3+h0rLn7lZKN5bKCHxJ6ECfHXaA=

{0}'''.format(to_string(content))

        response_text = '''HTTP/1.1 200 OK
Server: AliyunOSS
Date: Sat, 12 Dec 2015 00:36:25 GMT
Content-Length: 0
Connection: keep-alive
x-oss-request-id: 566B6C09D5A340D61A73D8F4
ETag: "DF1F9DE2B4C9FB0D3F3C3D5E3CF9F9C3"
x-oss-hash-crc64ecma: {0}'''.format(calc_crc(content))

        req_info = mock_response(do_request, response_text)
        result = bucket().upload_part('tmpuploadpart', '41337E94168A4E6F918C3D6CAAFADCCD', 3, content)

        self.assertRequest(req_info, request_text)
        self.assertEqual(result.etag, 'DF1F9DE2B4C9FB0D3F3C3D5E3CF9F9C3')
        self.assertEqual(result.crc, calc_crc(content))

    @patch('osslite.Session.do_request')
    def test_complete(self, do_request):
        request_text = '''POST /pasncdoyuvuvuiyewfsobdwn?uploadId=65484B78EF3846298B8E2DC1643F8F03 HTTP/1.1
Host: ming-oss-share.oss-cn-hangzhou.aliyuncs.com
Accept-Encoding: identity
Content-Length: 223
date: Sat, 12 Dec 2015 00:36:26 GMT
Connection: keep-alive
authorization: OSS fake-access-key-id:TgjWAumJAl8dDr0yqWHOyqqwrd0=
Accept: */*

<CompleteMultipartUpload><Part><PartNumber>1</PartNumber><ETag>"E6A2E7A0D6E8B0D3DCAB8C0E3DD6D7A0"</ETag></Part><Part><PartNumber>2</PartNumber><ETag>"24E94FA3A7E4C6C9F9D53B3C5FEB5E3C"</ETag></Part></CompleteMultipartUpload>'''

        response_text = '''HTTP/1.1 200 OK
Server: AliyunOSS
Date: Sat, 12 Dec 2015 00:36:26 GMT
Content-Type: application/xml
Content-Length: 327
Connection: keep-alive
x-oss-request-id: 566B6C0A9F8FC0A8F6A0C8A5
ETag: "1C787C506EABFB9B45EAAA8DB039F4B2-2"

<?xml version="1.0" encoding="UTF-8"?>
<CompleteMultipartUploadResult>
  <EncodingType>url</EncodingType>
  <Location>http://ming-oss-share.oss-cn-hangzhou.aliyuncs.com/pasncdoyuvuvuiyewfsobdwn</Location>
  <Bucket>ming-oss-share</Bucket>
  <Key>pasncdoyuvuvuiyewfsobdwn</Key>
  <ETag>"1C787C506EABFB9B45EAAA8DB039F4B2-2"</ETag>
</CompleteMultipartUploadResult>'''

        req_info = mock_response(do_request, response_text)

        parts = [osslite.models.PartInfo(2, '24E94FA3A7E4C6C9F9D53B3C5FEB5E3C'),
                 osslite.models.PartInfo(1, 'E6A2E7A0D6E8B0D3DCAB8C0E3DD6D7A0')]
        result = bucket().complete_multipart_upload('pasncdoyuvuvuiyewfsobdwn',
                                                    '65484B78EF3846298B8E2DC1643F8F03', parts)

        self.assertRequest(req_info, request_text)
        self.assertEqual(result.request_id, '566B6C0A9F8FC0A8F6A0C8A5')
        self.assertEqual(result.location, 'http://ming-oss-share.oss-cn-hangzhou.aliyuncs.com/pasncdoyuvuvuiyewfsobdwn')
        self.assertEqual(result.bucket, 'ming-oss-share')
        self.assertEqual(result.key, 'pasncdoyuvuvuiyewfsobdwn')
        self.assertEqual(result.etag, '1C787C506EABFB9B45EAAA8DB039F4B2-2')

    @patch('osslite.Session.do_request')
    def test_abort(self, do_request):
        request_text = '''DELETE /uosvelkvcqm?uploadId=D2DDC3E4A3C447DE8CAA08C2B0B6FFBA HTTP/1.1
Host: ming-oss-share.oss-cn-hangzhou.aliyuncs.com
Accept-Encoding: identity
Connection: keep-alive
Content-Length: 0
date: Sat, 12 Dec 2015 00:36:26 GMT
Accept: */*
authorization: OSS fake-access-key-id:1XAyyb8s1ojD5kP8CpAqYCLe/qg='''

        response_text = '''HTTP/1.1 204 No Content
Server: AliyunOSS
Date: Sat, 12 Dec 2015 00:36:26 GMT
Content-Length: 0
Connection: keep-alive
x-oss-request-id: 566B6C0A05200A20B174994F'''

        req_info = mock_response(do_request, response_text)
        result = bucket().abort_multipart_upload('uosvelkvcqm', 'D2DDC3E4A3C447DE8CAA08C2B0B6FFBA')

        self.assertRequest(req_info, request_text)
        self.assertEqual(result.status, 204)

    @patch('osslite.Session.do_request')
    def test_abort_no_such_upload(self, do_request):
        response_text = '''HTTP/1.1 404 Not Found
Content-Type: application/xml
x-oss-request-id: 566B6C0A05200A20B174994F

<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Code>NoSuchUpload</Code>
  <Message>The specified upload does not exist.</Message>
  <RequestId>566B6C0A05200A20B174994F</RequestId>
</Error>'''

        mock_response(do_request, response_text)

        self.assertRaises(osslite.exceptions.NoSuchUpload,
                          bucket().abort_multipart_upload, 'uosvelkvcqm', 'D2DDC3E4A3C447DE8CAA08C2B0B6FFBA')


if __name__ == '__main__':
    unittest.main()
