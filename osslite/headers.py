# -*- coding: utf-8 -*-
"""
osslite.headers
~~~~~~~~~~~~~~~
这个模块包含http请求里header的key定义
"""
OSS_HEADER_PREFIX = "x-oss-"

OSS_COPY_OBJECT_SOURCE = "x-oss-copy-source"

OSS_REQUEST_ID = "x-oss-request-id"

OSS_DATE = "x-oss-date"

OSS_HASH_CRC64_ECMA = "x-oss-hash-crc64ecma"
OSS_OBJECT_TYPE = "x-oss-object-type"
