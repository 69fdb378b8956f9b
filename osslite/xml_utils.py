# -*- coding: utf-8 -*-

"""
osslite.xml_utils
~~~~~~~~~~~~~~~~~

XML处理相关。

主要包括两类接口：
    - parse_开头的函数：用来解析服务器端返回的XML
    - to_开头的函数：用来生成发往服务器端的XML

"""
import logging
import xml.etree.ElementTree as ElementTree

from defusedxml.ElementTree import fromstring

from .models import (SimplifiedObjectInfo,
                     SimplifiedBucketInfo,
                     Owner)

from .compat import urlunquote, to_string
from .utils import iso8601_to_unixtime

logger = logging.getLogger(__name__)


def _defused_element_tree_from_string(body):
    return fromstring(body, forbid_dtd=True)


def _find_tag(parent, path):
    child = parent.find(path)
    if child is None:
        raise RuntimeError("parse xml: " + path + " could not be found under " + parent.tag)

    if child.text is None:
        return ''

    return to_string(child.text)


def _find_tag_with_default(parent, path, default_value):
    child = parent.find(path)
    if child is None:
        return default_value

    if child.text is None:
        return ''

    return to_string(child.text)


def _find_bool(parent, path):
    text = _find_tag(parent, path)
    if text == 'true':
        return True
    elif text == 'false':
        return False
    else:
        raise RuntimeError("parse xml: value of " + path + " is not a boolean under " + parent.tag)


def _find_int_with_default(parent, path, default_value):
    text = _find_tag_with_default(parent, path, None)
    if not text:
        return default_value

    return int(text)


def _find_object(parent, path, url_encoded):
    name = _find_tag(parent, path)
    if url_encoded:
        return urlunquote(name)
    else:
        return name


def _find_object_with_default(parent, path, url_encoded, default_value):
    name = _find_tag_with_default(parent, path, default_value)
    if url_encoded and name:
        return urlunquote(name)
    else:
        return name


def _is_url_encoding(root):
    node = root.find('EncodingType')
    if node is not None and to_string(node.text) == 'url':
        return True
    else:
        return False


def _node_to_string(root):
    return ElementTree.tostring(root, encoding='utf-8')


def _add_text_child(parent, tag, text):
    ElementTree.SubElement(parent, tag).text = text


def _find_owner(parent, path):
    if parent.find(path) is None:
        return None

    return Owner(_find_tag_with_default(parent, path + '/DisplayName', ''),
                 _find_tag_with_default(parent, path + '/ID', ''))


def parse_list_objects(result, body):
    root = _defused_element_tree_from_string(body)
    url_encoded = _is_url_encoding(root)

    result.name = _find_tag_with_default(root, 'Name', '')
    result.prefix = _find_object_with_default(root, 'Prefix', url_encoded, '')
    result.marker = _find_object_with_default(root, 'Marker', url_encoded, '')
    result.delimiter = _find_object_with_default(root, 'Delimiter', url_encoded, '')
    result.max_keys = _find_int_with_default(root, 'MaxKeys', 0)

    result.is_truncated = _find_bool(root, 'IsTruncated')
    if result.is_truncated:
        result.next_marker = _find_object(root, 'NextMarker', url_encoded)

    for contents_node in root.findall('Contents'):
        result.object_list.append(SimplifiedObjectInfo(
            _find_object(contents_node, 'Key', url_encoded),
            iso8601_to_unixtime(_find_tag(contents_node, 'LastModified')),
            _find_tag(contents_node, 'ETag').strip('"'),
            _find_tag_with_default(contents_node, 'Type', ''),
            int(_find_tag(contents_node, 'Size')),
            _find_tag_with_default(contents_node, 'StorageClass', ''),
            _find_owner(contents_node, 'Owner')
        ))

    for prefix_node in root.findall('CommonPrefixes'):
        result.prefix_list.append(_find_object(prefix_node, 'Prefix', url_encoded))

    return result


def parse_list_buckets(result, body):
    root = _defused_element_tree_from_string(body)

    result.prefix = _find_tag_with_default(root, 'Prefix', '')
    result.marker = _find_tag_with_default(root, 'Marker', '')
    result.max_keys = _find_int_with_default(root, 'MaxKeys', 0)
    result.owner = _find_owner(root, 'Owner')

    if root.find('IsTruncated') is None:
        result.is_truncated = False
    else:
        result.is_truncated = _find_bool(root, 'IsTruncated')

    if result.is_truncated:
        result.next_marker = _find_tag(root, 'NextMarker')

    for bucket_node in root.findall('Buckets/Bucket'):
        result.buckets.append(SimplifiedBucketInfo(
            _find_tag(bucket_node, 'Name'),
            _find_tag(bucket_node, 'Location'),
            iso8601_to_unixtime(_find_tag(bucket_node, 'CreationDate')),
            _find_tag_with_default(bucket_node, 'ExtranetEndpoint', ''),
            _find_tag_with_default(bucket_node, 'IntranetEndpoint', ''),
            _find_tag_with_default(bucket_node, 'StorageClass', '')
        ))

    return result


def parse_get_object_acl(result, body):
    root = _defused_element_tree_from_string(body)
    result.acl = _find_tag(root, 'AccessControlList/Grant')

    return result


def parse_init_multipart_upload(result, body):
    root = _defused_element_tree_from_string(body)
    url_encoded = _is_url_encoding(root)

    result.bucket = _find_tag_with_default(root, 'Bucket', '')
    result.key = _find_object_with_default(root, 'Key', url_encoded, '')
    result.upload_id = _find_tag(root, 'UploadId')

    return result


def parse_complete_multipart_upload(result, body):
    root = _defused_element_tree_from_string(body)
    url_encoded = _is_url_encoding(root)

    result.location = _find_tag_with_default(root, 'Location', '')
    result.bucket = _find_tag_with_default(root, 'Bucket', '')
    result.key = _find_object_with_default(root, 'Key', url_encoded, '')

    etag = _find_tag_with_default(root, 'ETag', None)
    if etag is not None:
        result.etag = etag.strip('"')

    return result


def to_complete_upload_request(parts):
    root = ElementTree.Element('CompleteMultipartUpload')
    for p in parts:
        part_node = ElementTree.SubElement(root, "Part")
        _add_text_child(part_node, 'PartNumber', str(p.part_number))
        _add_text_child(part_node, 'ETag', '"{0}"'.format(p.etag))

    return _node_to_string(root)
