# -*- coding: utf-8 -*-

"""
osslite.http
~~~~~~~~~~~~

这个模块包含了HTTP Adapters。同步接口内部使用requests库进行HTTP通信，异步接口使用aiohttp库，但是对使用者是透明的。
该模块中的 `Session` 、 `AsyncSession` 、 `Request` 、`Response` 对相应库的类做了简单的封装。
"""

import asyncio
import io
import logging
import platform

import aiohttp
import requests
import yarl
from requests.structures import CaseInsensitiveDict

from . import __version__, defaults
from .compat import to_bytes
from .exceptions import RequestError
from .headers import OSS_REQUEST_ID
from .utils import file_object_remaining_bytes, make_query_string

logger = logging.getLogger(__name__)

USER_AGENT = 'osslite-python/{0}({1}/{2}/{3};{4})'.format(
    __version__, platform.system(), platform.release(), platform.machine(), platform.python_version())


class Session(object):
    """属于同一个Session的请求共享一组连接池，如有可能也会重用HTTP连接。"""
    def __init__(self, pool_size=None):
        self.session = requests.Session()

        psize = defaults.get(pool_size, defaults.connection_pool_size)
        self.session.mount('http://', requests.adapters.HTTPAdapter(pool_connections=psize, pool_maxsize=psize))
        self.session.mount('https://', requests.adapters.HTTPAdapter(pool_connections=psize, pool_maxsize=psize))

    def do_request(self, req, timeout):
        try:
            logger.debug("Send request, method: {0}, url: {1}, params: {2}, headers: {3}, timeout: {4}".format(
                req.method, req.url, req.params, req.headers, timeout))
            return Response(self.session.request(req.method, req.full_url(),
                                                 data=req.data,
                                                 headers=req.headers,
                                                 stream=True,
                                                 timeout=timeout))
        except requests.RequestException as e:
            raise RequestError(e)

    def close(self):
        self.session.close()


class AsyncSession(object):
    """异步会话。属于同一个AsyncSession的请求共享一个 `aiohttp.ClientSession` 及其连接池。

    `aiohttp.ClientSession` 在第一次请求时才创建，因此AsyncSession可以在事件循环之外构造。
    使用完毕后需要调用 :func:`close` ，或者以 `async with` 的方式使用。
    """
    def __init__(self, pool_size=None):
        self.pool_size = defaults.get(pool_size, defaults.connection_pool_size)
        self.session = None

    def _get_session(self):
        if self.session is None or self.session.closed:
            connector = aiohttp.TCPConnector(limit=self.pool_size)
            self.session = aiohttp.ClientSession(connector=connector, auto_decompress=False)
        return self.session

    async def do_request(self, req, timeout):
        session = self._get_session()
        client_timeout = aiohttp.ClientTimeout(sock_connect=timeout, sock_read=timeout)

        logger.debug("Send async request, method: {0}, url: {1}, params: {2}, headers: {3}, timeout: {4}".format(
            req.method, req.url, req.params, req.headers, timeout))
        try:
            async with session.request(req.method, yarl.URL(req.full_url(), encoded=True),
                                       data=req.data,
                                       headers=_to_aiohttp_headers(req.headers),
                                       timeout=client_timeout) as resp:
                body = await resp.read()
                return AsyncResponse(resp.status, resp.headers, body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RequestError(e)

    async def close(self):
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class Request(object):
    def __init__(self, method, url,
                 data=None,
                 params=None,
                 headers=None,
                 app_name=''):
        self.method = method
        self.url = url
        self.data = _convert_request_body(data)
        self.params = params or {}

        if not isinstance(headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(headers)
        else:
            self.headers = headers

        # tell requests not to add 'Accept-Encoding: gzip, deflate' by default
        if 'Accept-Encoding' not in self.headers:
            self.headers['Accept-Encoding'] = None

        if 'User-Agent' not in self.headers:
            if app_name:
                self.headers['User-Agent'] = USER_AGENT + '/' + app_name
            else:
                self.headers['User-Agent'] = USER_AGENT

    def full_url(self):
        query = make_query_string(self.params)
        if query:
            return self.url + '?' + query
        else:
            return self.url


_CHUNK_SIZE = 8 * 1024


class Response(object):
    def __init__(self, response):
        self.response = response
        self.status = response.status_code
        self.headers = response.headers
        self.request_id = response.headers.get(OSS_REQUEST_ID, '')

    def read(self, amt=None):
        if amt is None:
            content = b''
            for chunk in self:
                content += chunk
            return content
        else:
            try:
                return next(self.response.iter_content(amt))
            except StopIteration:
                return b''
            except requests.RequestException as e:
                raise RequestError(e)

    def close(self):
        self.response.close()

    def __iter__(self):
        try:
            for chunk in self.response.iter_content(_CHUNK_SIZE):
                yield chunk
        except requests.RequestException as e:
            raise RequestError(e)


class AsyncResponse(object):
    """异步请求的响应。响应体在返回前已经全部读入内存，之后的read操作不再涉及网络。"""
    def __init__(self, status, headers, body):
        self.status = status
        self.headers = CaseInsensitiveDict(headers.items())
        self.request_id = self.headers.get(OSS_REQUEST_ID, '')
        self.body = body

        self.__io = io.BytesIO(body)

    def read(self, amt=None):
        return self.__io.read(amt)

    def close(self):
        self.__io.close()

    def __iter__(self):
        return iter(lambda: self.__io.read(_CHUNK_SIZE), b'')


def _to_aiohttp_headers(headers):
    # aiohttp does not accept None as a header value
    result = CaseInsensitiveDict((k, v) for k, v in headers.items() if v is not None)
    if 'Accept-Encoding' not in result:
        result['Accept-Encoding'] = 'identity'

    return dict(result.items())


# requests对于具有fileno()方法的file object，会用fileno()的返回值作为Content-Length。
# 这对于已经读取了部分内容，或执行了seek()的file object是不正确的。
#
# _convert_request_body()对于支持seek()和tell() file object，确保是从
# 当前位置读取，且只读取当前位置到文件结束的内容。
def _convert_request_body(data):
    data = to_bytes(data)

    if hasattr(data, '__len__'):
        return data

    if hasattr(data, 'seek') and hasattr(data, 'tell'):
        return SizedFileAdapter(data, file_object_remaining_bytes(data))

    return data


class SizedFileAdapter(object):
    """通过这个适配器（Adapter），可以把原先的 `file_object` 的长度限制到等于 `size`。"""
    def __init__(self, file_object, size):
        self.file_object = file_object
        self.size = size
        self.offset = 0

    def read(self, amt=None):
        if self.offset >= self.size:
            return b''

        if (amt is None or amt < 0) or (amt + self.offset >= self.size):
            data = self.file_object.read(self.size - self.offset)
            self.offset = self.size
            return data

        self.offset += amt
        return self.file_object.read(amt)

    @property
    def len(self):
        return self.size
