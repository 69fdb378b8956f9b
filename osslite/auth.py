# -*- coding: utf-8 -*-

import hmac
import hashlib
import logging

from requests.structures import CaseInsensitiveDict

from . import utils
from .compat import to_bytes
from .exceptions import ClientError
from .headers import OSS_DATE, OSS_HEADER_PREFIX

logger = logging.getLogger(__name__)


class Auth(object):
    """用于保存用户AccessKeyId、AccessKeySecret，以及计算签名的对象。签名算法为HMAC-SHA1。

    用法 ::

        >>> import osslite
        >>> auth = osslite.Auth('your-access-key-id', 'your-access-key-secret')

    :param str access_key_id: AccessKeyId，不能为空
    :param str access_key_secret: AccessKeySecret，不能为空
    """
    _subresource_key_set = frozenset(
        ['response-content-type', 'response-content-language',
         'response-cache-control', 'logging', 'response-content-encoding',
         'acl', 'uploadId', 'uploads', 'partNumber', 'group', 'link',
         'delete', 'website', 'location', 'objectInfo', 'objectMeta',
         'response-expires', 'response-content-disposition', 'cors', 'lifecycle',
         'restore', 'qos', 'referer', 'stat', 'bucketInfo', 'append', 'position', 'security-token',
         'live', 'comp', 'status', 'vod', 'startTime', 'endTime', 'x-oss-process',
         'symlink', 'callback', 'callback-var', 'tagging', 'encryption', 'versions',
         'versioning', 'versionId', 'policy', 'img', 'style', 'styleName',
         'replication', 'replicationLocation', 'replicationProgress', 'cname',
         'udf', 'udfName', 'udfImage', 'udfId', 'udfImageDesc', 'udfApplication', 'udfApplicationLog']
    )

    def __init__(self, access_key_id, access_key_secret):
        access_key_id = (access_key_id or '').strip()
        access_key_secret = (access_key_secret or '').strip()

        if not access_key_id or not access_key_secret:
            raise ClientError('access_key_id and access_key_secret should not be empty')

        logger.debug("Init Auth: access_key_id: {0}, access_key_secret: ******".format(access_key_id))
        self.id = access_key_id
        self.secret = access_key_secret

    def _sign_request(self, req, bucket_name, key):
        req.headers['date'] = utils.http_date()

        signature = self.make_signature(req.method, req.headers, bucket_name, key, req.params)
        req.headers['authorization'] = "OSS {0}:{1}".format(self.id, signature)

    def make_signature(self, method, headers, bucket_name, key, params=None):
        """计算签名，返回经过Base64编码的HMAC-SHA1摘要。相同的输入总是得到相同的签名。

        :param str method: HTTP方法，如'GET'、'PUT'
        :param headers: HTTP头部，需要包含Date或x-oss-date
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict
        :param str bucket_name: Bucket名，Service级别的操作传空串
        :param str key: 文件名
        :param dict params: 查询参数，只有子资源参与签名
        """
        string_to_sign = self.string_to_sign(method, headers, bucket_name, key, params)
        logger.debug('Make signature: string to be signed = {0}'.format(string_to_sign))

        h = hmac.new(to_bytes(self.secret), to_bytes(string_to_sign), hashlib.sha1)
        return utils.b64encode_as_string(h.digest())

    def string_to_sign(self, method, headers, bucket_name, key, params=None):
        if not isinstance(headers, CaseInsensitiveDict):
            headers = CaseInsensitiveDict(headers)

        resource_string = self.resource_string(bucket_name, key, params)
        headers_string = self.__get_headers_string(headers)

        content_md5 = headers.get('content-md5') or ''
        content_type = headers.get('content-type') or ''
        date = headers.get(OSS_DATE) or headers.get('date') or ''
        return '\n'.join([method,
                          content_md5,
                          content_type,
                          date,
                          headers_string + resource_string])

    def resource_string(self, bucket_name, key, params=None):
        if not bucket_name:
            return '/' + self.__get_subresource_string(params)
        else:
            return '/{0}/{1}{2}'.format(bucket_name, key, self.__get_subresource_string(params))

    def __get_headers_string(self, headers):
        canon_headers = []
        for k, v in headers.items():
            lower_key = k.lower()
            if lower_key.startswith(OSS_HEADER_PREFIX):
                canon_headers.append((lower_key, v))

        canon_headers.sort(key=lambda x: x[0])

        if canon_headers:
            return '\n'.join(k + ':' + v for k, v in canon_headers) + '\n'
        else:
            return ''

    def __get_subresource_string(self, params):
        if not params:
            return ''

        subresource_params = []
        for key, value in params.items():
            if key in self._subresource_key_set:
                subresource_params.append((key, value))

        subresource_params.sort(key=lambda e: e[0])

        if subresource_params:
            return '?' + '&'.join(self.__param_to_query(k, v) for k, v in subresource_params)
        else:
            return ''

    def __param_to_query(self, k, v):
        if v:
            return k + '=' + v
        else:
            return k


class AnonymousAuth(object):
    """用于匿名访问。

    .. note::
        匿名用户只能读取public-read的Bucket，或只能读取、写入public-read-write的Bucket。
        不能进行Service、Bucket相关的操作，也不能罗列文件等。
    """
    def _sign_request(self, req, bucket_name, key):
        pass
