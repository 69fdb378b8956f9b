# -*- coding: utf-8 -*-

"""
文件上传方法中的data参数
------------------------
诸如 :func:`put_object <Bucket.put_object>` 这样的上传接口都会有 `data` 参数用于接收用户数据。`data` 可以是下述类型
    - unicode类型：会自动用utf-8编码，作为上传的内容
    - bytes类型：不做任何转换，直接上传
    - file-like object：对于可以seek和tell的file object，从当前位置开始上传，直到文件结束；否则按照普通的
      可读对象处理，用Chunked Encoding方式上传。

下载方法返回的 :class:`GetObjectResult <osslite.models.GetObjectResult>` 是一个file-like object，可以调用 `read()`
获取文件内容，也可以对其进行迭代。

同步接口与异步接口
------------------
本模块中的 :class:`Service` 、 :class:`Bucket` 是同步接口，每个调用都会阻塞直到HTTP请求完成。
:mod:`osslite.async_api` 中的 `AsyncService` 、 `AsyncBucket` 是对应的异步接口，方法签名相同，但都是协程。
两者共享请求的构造、签名以及结果的解析，区别只在于发送请求的方式。

.. _unix_time:

Unix Time
---------
OSS中的时间戳都是Unix Time，即从1970年1月1日UTC零点开始到现在的秒数。罗列结果中的ISO8601时间、HTTP头部中的
GMT时间，都会被转换成Unix Time。
"""

import logging
import shutil

from . import defaults
from . import exceptions
from . import http
from . import utils
from . import xml_utils

from .compat import urlquote, urlparse, to_string
from .exceptions import ClientError, ResponseParseError
from .headers import OSS_COPY_OBJECT_SOURCE
from .models import *

logger = logging.getLogger(__name__)


class _Base(object):
    def __init__(self, auth, endpoint, is_cname, session, connect_timeout,
                 app_name='', enable_crc=True):
        self.auth = auth
        self.endpoint = _normalize_endpoint(endpoint.strip())
        if utils.is_valid_endpoint(self.endpoint) is not True:
            raise ClientError('The endpoint you has specified is not valid, endpoint: {0}'.format(endpoint))

        self.session = session or self._new_session()
        self.timeout = defaults.get(connect_timeout, defaults.connect_timeout)
        self.app_name = app_name
        self.enable_crc = enable_crc

        self._make_url = _UrlMaker(self.endpoint, is_cname)

    def _new_session(self):
        return http.Session()

    def _make_request(self, method, bucket_name, key, **kwargs):
        key = to_string(key)
        req = http.Request(method, self._make_url(bucket_name, key),
                           app_name=self.app_name,
                           **kwargs)
        self.auth._sign_request(req, bucket_name, key)
        return req

    def _check_response(self, resp):
        if resp.status // 100 != 2:
            e = exceptions.make_exception(resp)
            logger.error("Exception: {0}".format(e))
            raise e

        return resp

    def _do(self, method, bucket_name, key, **kwargs):
        req = self._make_request(method, bucket_name, key, **kwargs)

        resp = self._check_response(self.session.do_request(req, timeout=self.timeout))

        # Note that connections are only released back to the pool for reuse once all body data has been read;
        # be sure to either set stream to False or read the content property of the Response object.
        # For more details, please refer to http://docs.python-requests.org/en/master/user/advanced/#keep-alive.
        if resp.headers.get('content-length') == '0':
            resp.read()

        return resp

    def _parse_result(self, resp, parse_func, klass):
        result = klass(resp)
        _parse_body(result, parse_func, resp.read())
        return result


class _BucketBase(_Base):
    """同步、异步Bucket共用的部分：Bucket名的校验，以及各个请求的参数、头部的构造。"""

    ACL = 'acl'

    def __init__(self, auth, endpoint, bucket_name, is_cname, session, connect_timeout,
                 app_name, enable_crc):
        super(_BucketBase, self).__init__(auth, endpoint, is_cname, session, connect_timeout,
                                          app_name, enable_crc)
        self.set_bucket_name(bucket_name)

    def set_bucket_name(self, bucket_name):
        """设置之后请求所使用的Bucket名。

        :param str bucket_name: Bucket名，不合法时抛出 :class:`ClientError <osslite.exceptions.ClientError>`
        """
        bucket_name = (bucket_name or '').strip()
        if utils.is_valid_bucket_name(bucket_name) is not True:
            raise ClientError("The bucket_name is invalid, please check it.")

        self.bucket_name = bucket_name

    def _list_objects_params(self, prefix, delimiter, marker, max_keys, params):
        list_params = _merge_params(params, {'max-keys': str(max_keys), 'encoding-type': 'url'})
        for name, value in (('prefix', prefix), ('delimiter', delimiter), ('marker', marker)):
            if value:
                list_params[name] = value

        return list_params

    def _copy_object_headers(self, source_bucket_name, source_key, headers):
        headers = http.CaseInsensitiveDict(headers)
        headers[OSS_COPY_OBJECT_SOURCE] = '/' + (source_bucket_name or self.bucket_name) + '/' + \
                                          urlquote(to_string(source_key), '')
        return headers

    def _check_get_object_crc(self, result, headers):
        if not self.enable_crc:
            return

        headers = http.CaseInsensitiveDict(headers)
        if 'Range' in headers or headers.get('Accept-Encoding') == 'gzip':
            return

        utils.check_crc('get', result.client_crc, result.server_crc, result.request_id)


class Service(_Base):
    """用于Service操作的类，如罗列用户所有的Bucket。

    用法 ::

        >>> import osslite
        >>> auth = osslite.Auth('your-access-key-id', 'your-access-key-secret')
        >>> service = osslite.Service(auth, 'oss-cn-hangzhou.aliyuncs.com')
        >>> service.list_buckets()
        <osslite.models.ListBucketsResult object at 0x0299FAB0>

    :param auth: 包含了用户认证信息的Auth对象
    :type auth: osslite.Auth

    :param str endpoint: 访问域名，如杭州区域的域名为oss-cn-hangzhou.aliyuncs.com

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: osslite.Session

    :param float connect_timeout: 连接超时时间，以秒为单位。
    :param str app_name: 应用名。该参数不为空，则在User Agent中加入其值。
        注意到，最终这个字符串是要作为HTTP Header的值传输的，所以必须要遵循HTTP标准。
    """

    def __init__(self, auth, endpoint,
                 session=None,
                 connect_timeout=None,
                 app_name=''):
        logger.debug("Init oss service, endpoint: {0}, connect_timeout: {1}, app_name: {2}".format(
            endpoint, connect_timeout, app_name))
        super(Service, self).__init__(auth, endpoint, False, session, connect_timeout,
                                      app_name=app_name)

    def list_buckets(self, prefix='', marker='', max_keys=100, params=None):
        """根据前缀罗列用户的Bucket。

        :param str prefix: 只罗列Bucket名为该前缀的Bucket，空串表示罗列所有的Bucket
        :param str marker: 分页标志。首次调用传空串，后续使用返回值中的next_marker
        :param int max_keys: 每次调用最多返回的Bucket数目
        :param dict params: 其他的查询参数

        :return: 罗列的结果
        :rtype: osslite.models.ListBucketsResult
        """
        logger.debug("Start to list buckets, prefix: {0}, marker: {1}, max-keys: {2}".format(prefix, marker, max_keys))
        resp = self._do('GET', '', '', params=_list_buckets_params(prefix, marker, max_keys, params))
        logger.debug("List buckets done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_buckets, ListBucketsResult)


class Bucket(_BucketBase):
    """用于Object操作的类，诸如上传、下载、拷贝、删除Object，以及罗列Bucket里的文件等。

    用法（假设Bucket属于杭州区域） ::

        >>> import osslite
        >>> auth = osslite.Auth('your-access-key-id', 'your-access-key-secret')
        >>> bucket = osslite.Bucket(auth, 'http://oss-cn-hangzhou.aliyuncs.com', 'your-bucket')
        >>> bucket.put_object('readme.txt', 'content of the object')
        <osslite.models.PutObjectResult object at 0x029B9930>

    :param auth: 包含了用户认证信息的Auth对象
    :type auth: osslite.Auth

    :param str endpoint: 访问域名或者CNAME
    :param str bucket_name: Bucket名
    :param bool is_cname: 如果endpoint是CNAME则设为True；反之，则为False。

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: osslite.Session

    :param float connect_timeout: 连接超时时间，以秒为单位。

    :param str app_name: 应用名。该参数不为空，则在User Agent中加入其值。
        注意到，最终这个字符串是要作为HTTP Header的值传输的，所以必须要遵循HTTP标准。

    :param bool enable_crc: 是否在上传、下载时做CRC64校验
    """

    def __init__(self, auth, endpoint, bucket_name,
                 is_cname=False,
                 session=None,
                 connect_timeout=None,
                 app_name='',
                 enable_crc=True):
        logger.debug("Init oss bucket, endpoint: {0}, isCname: {1}, connect_timeout: {2}, app_name: {3}, enabled_crc: "
                     "{4}".format(endpoint, is_cname, connect_timeout, app_name, enable_crc))
        super(Bucket, self).__init__(auth, endpoint, bucket_name, is_cname, session, connect_timeout,
                                     app_name, enable_crc)

    def list_objects(self, prefix='', delimiter='', marker='', max_keys=100, headers=None, params=None):
        """根据前缀罗列Bucket里的文件。

        :param str prefix: 只罗列文件名为该前缀的文件
        :param str delimiter: 分隔符。可以用来模拟目录
        :param str marker: 分页标志。首次调用传空串，后续使用返回值的next_marker
        :param int max_keys: 最多返回文件的个数，文件和目录的和不能超过该值

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param dict params: 其他的查询参数

        :return: :class:`ListObjectsResult <osslite.models.ListObjectsResult>`
        """
        logger.debug(
            "Start to List objects, bucket: {0}, prefix: {1}, delimiter: {2}, marker: {3}, max-keys: {4}".format(
                self.bucket_name, to_string(prefix), delimiter, to_string(marker), max_keys))
        resp = self.__do_bucket('GET',
                                headers=headers,
                                params=self._list_objects_params(prefix, delimiter, marker, max_keys, params))
        logger.debug("List objects done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_objects, ListObjectsResult)

    def put_object(self, key, data, headers=None, params=None):
        """上传一个普通文件。

        用法 ::
            >>> bucket.put_object('readme.txt', 'content of readme.txt')
            >>> with open(u'local_file.txt', 'rb') as f:
            >>>     bucket.put_object('remote_file.txt', f)

        :param key: 上传到OSS的文件名

        :param data: 待上传的内容。
        :type data: bytes，str或file-like object

        :param headers: 用户指定的HTTP头部。可以指定Content-Type、Content-MD5、x-oss-meta-开头的头部等
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param dict params: 查询参数

        :return: :class:`PutObjectResult <osslite.models.PutObjectResult>`
        """
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), key)

        if self.enable_crc:
            data = utils.make_crc_adapter(data)

        logger.debug("Start to put object, bucket: {0}, key: {1}, headers: {2}".format(self.bucket_name, to_string(key),
                                                                                       headers))
        resp = self.__do_object('PUT', key, data=data, headers=headers, params=params)
        logger.debug("Put object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        result = PutObjectResult(resp)

        if self.enable_crc and result.crc is not None:
            utils.check_crc('put object', data.crc, result.crc, result.request_id)

        return result

    def put_object_from_file(self, key, filename, headers=None, params=None):
        """上传一个本地文件到OSS的普通文件。

        :param str key: 上传到OSS的文件名
        :param str filename: 本地文件名，需要有可读权限

        :param headers: 用户指定的HTTP头部。可以指定Content-Type、Content-MD5、x-oss-meta-开头的头部等
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :return: :class:`PutObjectResult <osslite.models.PutObjectResult>`
        """
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), filename)
        logger.debug("Put object from file, bucket: {0}, key: {1}, file path: {2}".format(
            self.bucket_name, to_string(key), filename))
        with open(to_string(filename), 'rb') as f:
            return self.put_object(key, f, headers=headers, params=params)

    def get_object(self, key, headers=None, params=None):
        """下载一个文件。

        用法 ::

            >>> result = bucket.get_object('readme.txt')
            >>> print(result.read())
            'hello world'

        :param key: 文件名

        :param headers: HTTP头部，如Range
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param dict params: 查询参数，如response-content-type等

        :return: file-like object

        :raises: 如果文件不存在，则抛出 :class:`NoSuchKey <osslite.exceptions.NoSuchKey>` ；还可能抛出其他异常
        """
        logger.debug("Start to get object, bucket: {0}， key: {1}, headers: {2}, params: {3}".format(
            self.bucket_name, to_string(key), headers, params))
        resp = self.__do_object('GET', key, headers=headers, params=params)
        logger.debug("Get object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return GetObjectResult(resp, self.enable_crc)

    def get_object_to_file(self, key, filename, headers=None, params=None):
        """下载一个文件到本地文件。

        :param key: 文件名
        :param filename: 本地文件名。要求父目录已经存在，且有写权限。

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param params: http 请求的查询字符串参数
        :type params: dict

        :return: 如果文件不存在，则抛出 :class:`NoSuchKey <osslite.exceptions.NoSuchKey>` ；还可能抛出其他异常
        """
        logger.debug("Start to get object to file, bucket: {0}, key: {1}, file path: {2}".format(
            self.bucket_name, to_string(key), filename))
        with open(to_string(filename), 'wb') as f:
            result = self.get_object(key, headers=headers, params=params)
            shutil.copyfileobj(result, f)

            self._check_get_object_crc(result, headers)
            return result

    def head_object(self, key, headers=None, params=None):
        """获取文件元信息。

        HTTP响应的头部包含了文件元信息，可以通过 `RequestResult` 的 `headers` 成员获得。
        用法 ::

            >>> result = bucket.head_object('readme.txt')
            >>> print(result.content_type)
            text/plain

        :param key: 文件名

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param dict params: 查询参数

        :return: :class:`HeadObjectResult <osslite.models.HeadObjectResult>`

        :raises: 如果Bucket不存在或者Object不存在，则抛出 :class:`NotFound <osslite.exceptions.NotFound>`
        """
        logger.debug("Start to head object, bucket: {0}, key: {1}, headers: {2}".format(
            self.bucket_name, to_string(key), headers))
        resp = self.__do_object('HEAD', key, headers=headers, params=params)
        logger.debug("Head object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return HeadObjectResult(resp)

    def get_object_acl(self, key):
        """获取文件的ACL。

        :return: :class:`GetObjectAclResult <osslite.models.GetObjectAclResult>`
        """
        logger.debug("Start to get object acl, bucket: {0}, key: {1}".format(self.bucket_name, to_string(key)))
        resp = self.__do_object('GET', key, params={Bucket.ACL: ''})
        logger.debug("Get object acl done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_get_object_acl, GetObjectAclResult)

    def copy_object(self, source_key, target_key, headers=None, params=None, source_bucket_name=None):
        """拷贝一个文件到当前Bucket。

        :param str source_key: 源文件名
        :param str target_key: 目标文件名

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :param dict params: 查询参数
        :param str source_bucket_name: 源Bucket名，缺省为当前Bucket

        :return: :class:`PutObjectResult <osslite.models.PutObjectResult>`
        """
        headers = self._copy_object_headers(source_bucket_name, source_key, headers)

        logger.debug(
            "Start to copy object, source bucket: {0}, source key: {1}, bucket: {2}, key: {3}, headers: {4}".format(
                source_bucket_name or self.bucket_name, to_string(source_key), self.bucket_name,
                to_string(target_key), headers))
        resp = self.__do_object('PUT', target_key, headers=headers, params=params)
        logger.debug("Copy object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return PutObjectResult(resp)

    def delete_object(self, key, params=None):
        """删除一个文件。

        :param str key: 文件名
        :param dict params: 查询参数

        :return: :class:`RequestResult <osslite.models.RequestResult>`
        """
        logger.info("Start to delete object, bucket: {0}, key: {1}".format(self.bucket_name, to_string(key)))
        resp = self.__do_object('DELETE', key, params=params)
        logger.debug("Delete object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return RequestResult(resp)

    def init_multipart_upload(self, key, headers=None):
        """初始化分片上传。

        返回值中的 `upload_id` 以及Bucket名和Object名三元组唯一对应了此次分片上传事件。

        :param str key: 待上传的文件名

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :return: :class:`InitMultipartUploadResult <osslite.models.InitMultipartUploadResult>`
        """
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), key)

        logger.debug("Start to init multipart upload, bucket: {0}, keys: {1}, headers: {2}".format(
            self.bucket_name, to_string(key), headers))
        resp = self.__do_object('POST', key, params={'uploads': ''}, headers=headers)
        logger.debug("Init multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_init_multipart_upload, InitMultipartUploadResult)

    def upload_part(self, key, upload_id, part_number, data, headers=None):
        """上传一个分片。

        :param str key: 待上传文件名，这个文件名要和 :func:`init_multipart_upload` 的文件名一致。
        :param str upload_id: 分片上传ID
        :param int part_number: 分片号，最小值是1.
        :param data: 待上传数据。
        :param headers: 用户指定的HTTP头部。可以指定Content-MD5头部等
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :return: :class:`PutObjectResult <osslite.models.PutObjectResult>`
        """
        if self.enable_crc:
            data = utils.make_crc_adapter(data)

        logger.debug(
            "Start to upload multipart, bucket: {0}, key: {1}, upload_id: {2}, part_number: {3}, headers: {4}".format(
                self.bucket_name, to_string(key), upload_id, part_number, headers))
        resp = self.__do_object('PUT', key,
                                params={'uploadId': upload_id, 'partNumber': str(part_number)},
                                headers=headers,
                                data=data)
        logger.debug("Upload multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        result = PutObjectResult(resp)

        if self.enable_crc and result.crc is not None:
            utils.check_crc('upload part', data.crc, result.crc, result.request_id)

        return result

    def complete_multipart_upload(self, key, upload_id, parts, headers=None):
        """完成分片上传，创建文件。

        :param str key: 待上传的文件名，这个文件名要和 :func:`init_multipart_upload` 的文件名一致。
        :param str upload_id: 分片上传ID

        :param parts: PartInfo列表。PartInfo中的part_number和etag是必填项。其中的etag可以从 :func:`upload_part` 的返回值中得到。
        :type parts: list of `PartInfo <osslite.models.PartInfo>`

        :param headers: HTTP头部
        :type headers: 可以是dict，建议是osslite.CaseInsensitiveDict

        :return: :class:`CompleteMultipartUploadResult <osslite.models.CompleteMultipartUploadResult>`
        """
        data = xml_utils.to_complete_upload_request(sorted(parts, key=lambda p: p.part_number))

        logger.debug("Start to complete multipart upload, bucket: {0}, key: {1}, upload_id: {2}, parts: {3}".format(
            self.bucket_name, to_string(key), upload_id, data))
        resp = self.__do_object('POST', key,
                                params={'uploadId': upload_id},
                                data=data,
                                headers=headers)
        logger.debug(
            "Complete multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return self._parse_result(resp, xml_utils.parse_complete_multipart_upload, CompleteMultipartUploadResult)

    def abort_multipart_upload(self, key, upload_id):
        """取消分片上传。

        :param str key: 待上传的文件名，这个文件名要和 :func:`init_multipart_upload` 的文件名一致。
        :param str upload_id: 分片上传ID

        :return: :class:`RequestResult <osslite.models.RequestResult>`
        """
        logger.debug("Start to abort multipart upload, bucket: {0}, key: {1}, upload_id: {2}".format(
            self.bucket_name, to_string(key), upload_id))
        resp = self.__do_object('DELETE', key,
                                params={'uploadId': upload_id})
        logger.debug("Abort multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return RequestResult(resp)

    def __do_object(self, method, key, **kwargs):
        return self._do(method, self.bucket_name, key, **kwargs)

    def __do_bucket(self, method, **kwargs):
        return self._do(method, self.bucket_name, '', **kwargs)


def _merge_params(params, extra):
    merged = dict(params or {})
    merged.update(extra)
    return merged


def _list_buckets_params(prefix, marker, max_keys, params):
    list_params = _merge_params(params, {'max-keys': str(max_keys)})
    for name, value in (('prefix', prefix), ('marker', marker)):
        if value:
            list_params[name] = value

    return list_params


def _parse_body(result, parse_func, body):
    try:
        parse_func(result, body)
    except ResponseParseError:
        raise
    except Exception as e:
        e = ResponseParseError('{0}: {1}'.format(e.__class__.__name__, e),
                               status=result.status, headers=result.headers)
        logger.error("Exception: {0}".format(e))
        raise e


def _normalize_endpoint(endpoint):
    if not endpoint.startswith('http://') and not endpoint.startswith('https://'):
        return 'http://' + endpoint
    else:
        return endpoint


_ENDPOINT_TYPE_ALIYUN = 0
_ENDPOINT_TYPE_CNAME = 1
_ENDPOINT_TYPE_IP = 2


def _determine_endpoint_type(netloc, is_cname, bucket_name):
    if utils.is_ip_or_localhost(netloc):
        return _ENDPOINT_TYPE_IP

    if is_cname:
        return _ENDPOINT_TYPE_CNAME

    if utils.is_valid_bucket_name(bucket_name):
        return _ENDPOINT_TYPE_ALIYUN
    else:
        return _ENDPOINT_TYPE_IP


class _UrlMaker(object):
    def __init__(self, endpoint, is_cname):
        p = urlparse(endpoint)

        self.scheme = p.scheme
        self.netloc = p.netloc
        self.is_cname = is_cname

    def __call__(self, bucket_name, key):
        self.type = _determine_endpoint_type(self.netloc, self.is_cname, bucket_name)

        key = urlquote(key, '')

        if self.type == _ENDPOINT_TYPE_CNAME:
            return '{0}://{1}/{2}'.format(self.scheme, self.netloc, key)

        if self.type == _ENDPOINT_TYPE_IP:
            if bucket_name:
                return '{0}://{1}/{2}/{3}'.format(self.scheme, self.netloc, bucket_name, key)
            else:
                return '{0}://{1}/{2}'.format(self.scheme, self.netloc, key)

        if not bucket_name:
            return '{0}://{1}/'.format(self.scheme, self.netloc)

        return '{0}://{1}.{2}/{3}'.format(self.scheme, bucket_name, self.netloc, key)
