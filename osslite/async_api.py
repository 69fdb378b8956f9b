# -*- coding: utf-8 -*-

"""
osslite.async_api
~~~~~~~~~~~~~~~~~

异步接口。`AsyncService` 、 `AsyncBucket` 的方法和 :class:`Service <osslite.Service>` 、
:class:`Bucket <osslite.Bucket>` 一一对应，参数、返回值以及抛出的异常都相同，只是需要 `await` 。

用法 ::

    >>> import asyncio
    >>> import osslite
    >>> async def main():
    ...     auth = osslite.Auth('your-access-key-id', 'your-access-key-secret')
    ...     async with osslite.AsyncBucket(auth, 'oss-cn-hangzhou.aliyuncs.com', 'your-bucket') as bucket:
    ...         await bucket.put_object('readme.txt', 'content of the object')
    ...         result = await bucket.get_object('readme.txt')
    ...         return result.read()
    >>> asyncio.run(main())
    b'content of the object'

上传的数据会先全部读入内存再发送；下载的内容在请求返回时也已经全部读入内存。
"""

import logging

import aiofiles

from . import http
from . import utils
from . import xml_utils

from .api import _Base, _BucketBase, _list_buckets_params
from .compat import to_string
from .models import *

logger = logging.getLogger(__name__)


class _AsyncMixin(object):
    def _new_session(self):
        return http.AsyncSession()

    def _make_request(self, method, bucket_name, key, **kwargs):
        # aiohttp adds 'Content-Type: application/octet-stream' to a request with body, which must be signed too
        if kwargs.get('data') is not None:
            headers = http.CaseInsensitiveDict(kwargs.get('headers'))
            if 'Content-Type' not in headers:
                headers['Content-Type'] = 'application/octet-stream'
            kwargs['headers'] = headers

        return super(_AsyncMixin, self)._make_request(method, bucket_name, key, **kwargs)

    async def _do(self, method, bucket_name, key, **kwargs):
        req = self._make_request(method, bucket_name, key, **kwargs)
        resp = await self.session.do_request(req, timeout=self.timeout)
        return self._check_response(resp)

    async def close(self):
        """关闭底层的 :class:`AsyncSession <osslite.http.AsyncSession>` 。"""
        await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class AsyncService(_AsyncMixin, _Base):
    """:class:`Service <osslite.Service>` 的异步版本。

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: osslite.AsyncSession
    """

    def __init__(self, auth, endpoint,
                 session=None,
                 connect_timeout=None,
                 app_name=''):
        logger.debug("Init async oss service, endpoint: {0}, connect_timeout: {1}, app_name: {2}".format(
            endpoint, connect_timeout, app_name))
        super(AsyncService, self).__init__(auth, endpoint, False, session, connect_timeout,
                                           app_name=app_name)

    async def list_buckets(self, prefix='', marker='', max_keys=100, params=None):
        """参考 :func:`Service.list_buckets <osslite.Service.list_buckets>` 。"""
        logger.debug("Start to list buckets, prefix: {0}, marker: {1}, max-keys: {2}".format(prefix, marker, max_keys))
        resp = await self._do('GET', '', '', params=_list_buckets_params(prefix, marker, max_keys, params))
        logger.debug("List buckets done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_buckets, ListBucketsResult)


class AsyncBucket(_AsyncMixin, _BucketBase):
    """:class:`Bucket <osslite.Bucket>` 的异步版本。

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: osslite.AsyncSession
    """

    def __init__(self, auth, endpoint, bucket_name,
                 is_cname=False,
                 session=None,
                 connect_timeout=None,
                 app_name='',
                 enable_crc=True):
        logger.debug("Init async oss bucket, endpoint: {0}, isCname: {1}, connect_timeout: {2}, app_name: {3}, "
                     "enabled_crc: {4}".format(endpoint, is_cname, connect_timeout, app_name, enable_crc))
        super(AsyncBucket, self).__init__(auth, endpoint, bucket_name, is_cname, session, connect_timeout,
                                          app_name, enable_crc)

    async def list_objects(self, prefix='', delimiter='', marker='', max_keys=100, headers=None, params=None):
        logger.debug(
            "Start to List objects, bucket: {0}, prefix: {1}, delimiter: {2}, marker: {3}, max-keys: {4}".format(
                self.bucket_name, to_string(prefix), delimiter, to_string(marker), max_keys))
        resp = await self._do('GET', self.bucket_name, '',
                              headers=headers,
                              params=self._list_objects_params(prefix, delimiter, marker, max_keys, params))
        logger.debug("List objects done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_objects, ListObjectsResult)

    async def put_object(self, key, data, headers=None, params=None):
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), key)
        data = utils.read_all(data)

        logger.debug("Start to put object, bucket: {0}, key: {1}, headers: {2}".format(self.bucket_name, to_string(key),
                                                                                       headers))
        resp = await self._do('PUT', self.bucket_name, key, data=data, headers=headers, params=params)
        logger.debug("Put object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        result = PutObjectResult(resp)

        if self.enable_crc and result.crc is not None:
            utils.check_crc('put object', utils.calc_crc64(data), result.crc, result.request_id)

        return result

    async def put_object_from_file(self, key, filename, headers=None, params=None):
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), filename)
        logger.debug("Put object from file, bucket: {0}, key: {1}, file path: {2}".format(
            self.bucket_name, to_string(key), filename))
        async with aiofiles.open(to_string(filename), 'rb') as f:
            data = await f.read()

        return await self.put_object(key, data, headers=headers, params=params)

    async def get_object(self, key, headers=None, params=None):
        logger.debug("Start to get object, bucket: {0}, key: {1}, headers: {2}, params: {3}".format(
            self.bucket_name, to_string(key), headers, params))
        resp = await self._do('GET', self.bucket_name, key, headers=headers, params=params)
        logger.debug("Get object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return GetObjectResult(resp, self.enable_crc)

    async def get_object_to_file(self, key, filename, headers=None, params=None):
        logger.debug("Start to get object to file, bucket: {0}, key: {1}, file path: {2}".format(
            self.bucket_name, to_string(key), filename))
        result = await self.get_object(key, headers=headers, params=params)

        async with aiofiles.open(to_string(filename), 'wb') as f:
            for chunk in result:
                await f.write(chunk)

        self._check_get_object_crc(result, headers)
        return result

    async def head_object(self, key, headers=None, params=None):
        logger.debug("Start to head object, bucket: {0}, key: {1}, headers: {2}".format(
            self.bucket_name, to_string(key), headers))
        resp = await self._do('HEAD', self.bucket_name, key, headers=headers, params=params)
        logger.debug("Head object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return HeadObjectResult(resp)

    async def get_object_acl(self, key):
        logger.debug("Start to get object acl, bucket: {0}, key: {1}".format(self.bucket_name, to_string(key)))
        resp = await self._do('GET', self.bucket_name, key, params={AsyncBucket.ACL: ''})
        logger.debug("Get object acl done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_get_object_acl, GetObjectAclResult)

    async def copy_object(self, source_key, target_key, headers=None, params=None, source_bucket_name=None):
        headers = self._copy_object_headers(source_bucket_name, source_key, headers)

        logger.debug(
            "Start to copy object, source bucket: {0}, source key: {1}, bucket: {2}, key: {3}, headers: {4}".format(
                source_bucket_name or self.bucket_name, to_string(source_key), self.bucket_name,
                to_string(target_key), headers))
        resp = await self._do('PUT', self.bucket_name, target_key, headers=headers, params=params)
        logger.debug("Copy object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return PutObjectResult(resp)

    async def delete_object(self, key, params=None):
        logger.info("Start to delete object, bucket: {0}, key: {1}".format(self.bucket_name, to_string(key)))
        resp = await self._do('DELETE', self.bucket_name, key, params=params)
        logger.debug("Delete object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return RequestResult(resp)

    async def init_multipart_upload(self, key, headers=None):
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), key)

        logger.debug("Start to init multipart upload, bucket: {0}, keys: {1}, headers: {2}".format(
            self.bucket_name, to_string(key), headers))
        resp = await self._do('POST', self.bucket_name, key, params={'uploads': ''}, headers=headers)
        logger.debug("Init multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_init_multipart_upload, InitMultipartUploadResult)

    async def upload_part(self, key, upload_id, part_number, data, headers=None):
        data = utils.read_all(data)

        logger.debug(
            "Start to upload multipart, bucket: {0}, key: {1}, upload_id: {2}, part_number: {3}, headers: {4}".format(
                self.bucket_name, to_string(key), upload_id, part_number, headers))
        resp = await self._do('PUT', self.bucket_name, key,
                              params={'uploadId': upload_id, 'partNumber': str(part_number)},
                              headers=headers,
                              data=data)
        logger.debug("Upload multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        result = PutObjectResult(resp)

        if self.enable_crc and result.crc is not None:
            utils.check_crc('upload part', utils.calc_crc64(data), result.crc, result.request_id)

        return result

    async def complete_multipart_upload(self, key, upload_id, parts, headers=None):
        data = xml_utils.to_complete_upload_request(sorted(parts, key=lambda p: p.part_number))

        logger.debug("Start to complete multipart upload, bucket: {0}, key: {1}, upload_id: {2}, parts: {3}".format(
            self.bucket_name, to_string(key), upload_id, data))
        resp = await self._do('POST', self.bucket_name, key,
                              params={'uploadId': upload_id},
                              data=data,
                              headers=headers)
        logger.debug(
            "Complete multipart upload done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return self._parse_result(resp, xml_utils.parse_complete_multipart_upload, CompleteMultipartUploadResult)

    async def abort_multipart_upload(self, key, upload_id):
        logger.debug("Start to abort multipart upload, bucket: {0}, key: {1}, upload_id: {2}".format(
            self.bucket_name, to_string(key), upload_id))
        resp = await self._do('DELETE', self.bucket_name, key,
                              params={'uploadId': upload_id})
        logger.debug("Abort multipart done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return RequestResult(resp)
