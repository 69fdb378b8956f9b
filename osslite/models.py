# -*- coding: utf-8 -*-

"""
osslite.models
~~~~~~~~~~~~~~

该模块包含API接口所需要的输入参数以及返回值类型。
"""
import logging

from .exceptions import ResponseParseError
from .utils import http_to_unixtime, make_crc_adapter
from .headers import OSS_HASH_CRC64_ECMA, OSS_OBJECT_TYPE

logger = logging.getLogger(__name__)


class PartInfo(object):
    """表示分片信息的文件。

    用于 :func:`complete_multipart_upload <osslite.Bucket.complete_multipart_upload>` 的输入。

    :param int part_number: 分片号
    :param str etag: 分片的ETag
    :param int size: 分片的大小
    """
    def __init__(self, part_number, etag, size=None):
        self.part_number = part_number
        self.etag = etag
        self.size = size


def _hget(headers, key, converter=lambda x: x):
    if key in headers:
        return converter(headers[key])
    else:
        return None


def _get_etag(headers):
    return _hget(headers, 'etag', lambda x: x.strip('"'))


class RequestResult(object):
    def __init__(self, resp):
        #: HTTP响应
        self.resp = resp

        #: HTTP状态码
        self.status = resp.status

        #: HTTP头
        self.headers = resp.headers

        #: 请求ID，用于跟踪一个OSS请求。提交工单时，最好能够提供请求ID
        self.request_id = resp.request_id

    def _get_header(self, key, converter=lambda x: x):
        try:
            return _hget(self.headers, key, converter)
        except ValueError as e:
            e = ResponseParseError('{0}: {1}'.format(key, e), status=self.status, headers=self.headers)
            logger.error("Exception: {0}".format(e))
            raise e


class HeadObjectResult(RequestResult):
    def __init__(self, resp):
        super(HeadObjectResult, self).__init__(resp)

        #: 文件类型，可以是'Normal'、'Multipart'、'Appendable'等
        self.object_type = _hget(self.headers, OSS_OBJECT_TYPE)

        #: 文件最后修改时间，类型为int。参考 :ref:`unix_time` 。
        self.last_modified = self._get_header('last-modified', http_to_unixtime)

        #: 文件的MIME类型
        self.content_type = _hget(self.headers, 'content-type')

        #: Content-Length，可能是None。
        self.content_length = self._get_header('content-length', int)

        #: HTTP ETag
        self.etag = _get_etag(self.headers)

        #: 文件 server_crc
        self.server_crc = self._get_header(OSS_HASH_CRC64_ECMA, int)


class GetObjectResult(HeadObjectResult):
    """下载文件的结果，是一个file-like object，可以调用 `read()` 获取文件内容。"""
    def __init__(self, resp, crc_enabled=False):
        super(GetObjectResult, self).__init__(resp)
        self.__crc_enabled = crc_enabled

        if self.__crc_enabled:
            self.stream = make_crc_adapter(self.resp)
        else:
            self.stream = self.resp

    def read(self, amt=None):
        return self.stream.read(amt)

    def close(self):
        self.resp.close()

    def __iter__(self):
        return iter(self.stream)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def client_crc(self):
        if self.__crc_enabled:
            return self.stream.crc
        else:
            return None


class PutObjectResult(RequestResult):
    def __init__(self, resp):
        super(PutObjectResult, self).__init__(resp)

        #: HTTP ETag
        self.etag = _get_etag(self.headers)

        #: 文件上传后，OSS上文件的CRC64值
        self.crc = self._get_header(OSS_HASH_CRC64_ECMA, int)


class InitMultipartUploadResult(RequestResult):
    def __init__(self, resp):
        super(InitMultipartUploadResult, self).__init__(resp)

        #: Bucket名
        self.bucket = ''

        #: 文件名
        self.key = ''

        #: 新生成的Upload ID
        self.upload_id = None


class CompleteMultipartUploadResult(PutObjectResult):
    def __init__(self, resp):
        super(CompleteMultipartUploadResult, self).__init__(resp)

        #: 文件的访问地址
        self.location = ''

        #: Bucket名
        self.bucket = ''

        #: 文件名
        self.key = ''


class Owner(object):
    def __init__(self, display_name, owner_id):
        self.display_name = display_name
        self.id = owner_id


class SimplifiedObjectInfo(object):
    def __init__(self, key, last_modified, etag, type, size, storage_class, owner=None):
        #: 文件名，或公共前缀名。
        self.key = key

        #: 文件的最后修改时间
        self.last_modified = last_modified

        #: HTTP ETag
        self.etag = etag

        #: 文件类型
        self.type = type

        #: 文件大小
        self.size = size

        #: 文件的存储类别，是一个字符串。
        self.storage_class = storage_class

        #: owner信息, 类型为: class:`Owner <osslite.models.Owner>`
        self.owner = owner

    def is_prefix(self):
        """如果是公共前缀，返回True；是文件，则返回False"""
        return self.last_modified is None


class ListObjectsResult(RequestResult):
    def __init__(self, resp):
        super(ListObjectsResult, self).__init__(resp)

        #: Bucket名
        self.name = ''

        #: 本次罗列使用的前缀、分页标记、分隔符及最大条目数，与请求参数一致。
        self.prefix = ''
        self.marker = ''
        self.delimiter = ''
        self.max_keys = 0

        #: True表示还有更多的文件可以罗列；False表示已经列举完毕。
        self.is_truncated = False

        #: 下一次罗列的分页标记符，即，可以作为 :func:`list_objects <osslite.Bucket.list_objects>` 的 `marker` 参数。
        self.next_marker = ''

        #: 本次罗列得到的文件列表。其中元素的类型为 :class:`SimplifiedObjectInfo` 。
        self.object_list = []

        #: 本次罗列得到的公共前缀列表，类型为str列表。
        self.prefix_list = []


OBJECT_ACL_DEFAULT = 'default'
OBJECT_ACL_PRIVATE = 'private'
OBJECT_ACL_PUBLIC_READ = 'public-read'
OBJECT_ACL_PUBLIC_READ_WRITE = 'public-read-write'


class GetObjectAclResult(RequestResult):
    def __init__(self, resp):
        super(GetObjectAclResult, self).__init__(resp)

        #: 文件的ACL，其值可以是 `OBJECT_ACL_DEFAULT`、`OBJECT_ACL_PRIVATE`、`OBJECT_ACL_PUBLIC_READ`或
        #: `OBJECT_ACL_PUBLIC_READ_WRITE`
        self.acl = ''


class SimplifiedBucketInfo(object):
    """:func:`list_buckets <osslite.Service.list_buckets>` 结果中的单个元素类型。"""
    def __init__(self, name, location, creation_date, extranet_endpoint, intranet_endpoint, storage_class):
        #: Bucket名
        self.name = name

        #: Bucket的区域
        self.location = location

        #: Bucket的创建时间，类型为int。参考 :ref:`unix_time`。
        self.creation_date = creation_date

        #: Bucket访问的外网域名
        self.extranet_endpoint = extranet_endpoint

        #: 同区域ECS访问Bucket的内网域名
        self.intranet_endpoint = intranet_endpoint

        #: Bucket存储类型，支持“Standard”、“IA”、“Archive”、“ColdArchive”
        self.storage_class = storage_class


class ListBucketsResult(RequestResult):
    def __init__(self, resp):
        super(ListBucketsResult, self).__init__(resp)

        #: 本次罗列使用的前缀、分页标记及最大条目数。
        self.prefix = ''
        self.marker = ''
        self.max_keys = 0

        #: True表示还有更多的Bucket可以罗列；False表示已经列举完毕。
        self.is_truncated = False

        #: 下一次罗列的分页标记符，即，可以作为 :func:`list_buckets <osslite.Service.list_buckets>` 的 `marker` 参数。
        self.next_marker = ''

        #: Bucket的拥有者，类型为 :class:`Owner` ，可能是None。
        self.owner = None

        #: 得到的Bucket列表，类型为 :class:`SimplifiedBucketInfo` 。
        self.buckets = []
