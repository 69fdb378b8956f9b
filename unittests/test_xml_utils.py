# -*- coding: utf-8 -*-

import unittest
import xml.etree.ElementTree as ElementTree

import osslite
from osslite.models import PartInfo, ListObjectsResult, CompleteMultipartUploadResult
from osslite.xml_utils import _find_tag, _find_bool, _find_tag_with_default
from osslite.xml_utils import (parse_list_objects,
                               parse_complete_multipart_upload,
                               to_complete_upload_request)
from .common import MockResponse


class TestXmlUtils(unittest.TestCase):
    def test_find_tag(self):
        body = '''
        <Test>
            <Grant>private</Grant>
            <Empty></Empty>
        </Test>'''

        root = ElementTree.fromstring(body)

        self.assertEqual(_find_tag(root, 'Grant'), 'private')
        self.assertEqual(_find_tag(root, 'Empty'), '')
        self.assertRaises(RuntimeError, _find_tag, root, 'none_exist_tag')

        self.assertEqual(_find_tag_with_default(root, 'none_exist_tag', 'default'), 'default')

    def test_find_bool(self):
        body = '''
        <Test>
            <BoolTag1>true</BoolTag1>
            <BoolTag2>false</BoolTag2>
            <BoolTag3>yes</BoolTag3>
        </Test>'''

        root = ElementTree.fromstring(body)

        self.assertEqual(_find_bool(root, 'BoolTag1'), True)
        self.assertEqual(_find_bool(root, 'BoolTag2'), False)

        self.assertRaises(RuntimeError, _find_bool, root, 'BoolTag3')
        self.assertRaises(RuntimeError, _find_bool, root, 'none_exist_tag')

    def test_parse_list_objects_without_url_encoding(self):
        body = b'''<?xml version="1.0" encoding="UTF-8"?>
        <ListBucketResult>
            <Name>oss-example</Name>
            <Prefix>a%2F</Prefix>
            <IsTruncated>false</IsTruncated>
            <Contents>
                <Key>a%2Fb</Key>
                <LastModified>2012-02-24T08:42:32.000Z</LastModified>
                <ETag>"5B3C1A2E053D763E1B002CC607C5A0FE"</ETag>
                <Size>344606</Size>
            </Contents>
        </ListBucketResult>'''

        result = parse_list_objects(ListObjectsResult(MockResponse('HTTP/1.1 200 OK')), body)

        self.assertEqual(result.prefix, 'a%2F')
        self.assertEqual(result.object_list[0].key, 'a%2Fb')
        self.assertEqual(result.object_list[0].last_modified, 1330072952)
        self.assertEqual(result.object_list[0].type, '')
        self.assertEqual(result.object_list[0].storage_class, '')

    def test_parse_list_objects_chinese_key(self):
        body = osslite.to_bytes(u'''<?xml version="1.0" encoding="UTF-8"?>
        <ListBucketResult>
            <EncodingType>url</EncodingType>
            <IsTruncated>false</IsTruncated>
            <CommonPrefixes>
                <Prefix>%E4%B8%AD%E6%96%87%2F</Prefix>
            </CommonPrefixes>
        </ListBucketResult>''')

        result = parse_list_objects(ListObjectsResult(MockResponse('HTTP/1.1 200 OK')), body)

        self.assertEqual(result.prefix_list, [u'中文/'])

    def test_parse_complete_without_body_etag(self):
        resp = MockResponse('''HTTP/1.1 200 OK
ETag: "1C787C506EABFB9B45EAAA8DB039F4B2-2"''')

        body = b'''<CompleteMultipartUploadResult>
            <Bucket>oss-example</Bucket>
            <Key>multipart.data</Key>
        </CompleteMultipartUploadResult>'''

        result = parse_complete_multipart_upload(CompleteMultipartUploadResult(resp), body)

        self.assertEqual(result.etag, '1C787C506EABFB9B45EAAA8DB039F4B2-2')
        self.assertEqual(result.location, '')
        self.assertEqual(result.key, 'multipart.data')

    def test_to_complete_upload_request(self):
        data = to_complete_upload_request([PartInfo(1, 'AAA'), PartInfo(2, 'BBB', size=100)])

        root = ElementTree.fromstring(data)
        self.assertEqual(root.tag, 'CompleteMultipartUpload')

        parts = root.findall('Part')
        self.assertEqual([_find_tag(p, 'PartNumber') for p in parts], ['1', '2'])
        self.assertEqual([_find_tag(p, 'ETag') for p in parts], ['"AAA"', '"BBB"'])


if __name__ == '__main__':
    unittest.main()
