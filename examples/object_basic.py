# -*- coding: utf-8 -*-

import os
import shutil

import osslite


# 以下代码展示了基本的文件上传、下载、罗列、拷贝、删除用法。


# 首先初始化AccessKeyId、AccessKeySecret、Endpoint等信息。
# 通过环境变量获取，或者把诸如“<你的AccessKeyId>”替换成真实的AccessKeyId等。
#
# 以杭州区域为例，Endpoint可以是：
#   http://oss-cn-hangzhou.aliyuncs.com
#   https://oss-cn-hangzhou.aliyuncs.com
# 分别以HTTP、HTTPS协议访问。
access_key_id = os.getenv('OSS_TEST_ACCESS_KEY_ID', '<你的AccessKeyId>')
access_key_secret = os.getenv('OSS_TEST_ACCESS_KEY_SECRET', '<你的AccessKeySecret>')
bucket_name = os.getenv('OSS_TEST_BUCKET', '<你的Bucket>')
endpoint = os.getenv('OSS_TEST_ENDPOINT', '<你的访问域名>')


# 确认上面的参数都填写正确了
for param in (access_key_id, access_key_secret, bucket_name, endpoint):
    assert '<' not in param, '请设置参数：' + param


# 打开调试日志，可以看到每个请求的签名和耗时
osslite.set_stream_logger(level=10)

auth = osslite.Auth(access_key_id, access_key_secret)

# 列举当前账号下的Bucket
for b in osslite.BucketIterator(osslite.Service(auth, endpoint)):
    print('bucket: ' + b.name)


# 创建Bucket对象，所有Object相关的接口都可以通过Bucket对象来进行
bucket = osslite.Bucket(auth, endpoint, bucket_name)


# 上传一段字符串。Object名是motto.txt，内容是一段名言。
bucket.put_object('motto.txt', 'Never give up. - Jack Ma')

# 获取Object的元信息
meta = bucket.head_object('motto.txt')
print('last modified: {0}, etag: {1}, size: {2}'.format(meta.last_modified, meta.etag, meta.content_length))


# 因为get_object()方法返回的是一个file-like object，所以我们可以直接用shutil.copyfileobj()做拷贝
with open(u'本地座右铭.txt', 'wb') as f:
    shutil.copyfileobj(bucket.get_object('motto.txt'), f)


# 把本地文件上传到OSS，新的Object叫做 “云上座右铭.txt”
bucket.put_object_from_file(u'云上座右铭.txt', u'本地座右铭.txt')


# 拷贝Object
bucket.copy_object('motto.txt', 'motto-copy.txt')


# 列举前缀为motto的所有Object
for obj in osslite.ObjectIterator(bucket, prefix='motto'):
    print('object: {0}, size: {1}'.format(obj.key, obj.size))


# 删除上面创建的Object和本地文件
for key in ('motto.txt', 'motto-copy.txt', u'云上座右铭.txt'):
    bucket.delete_object(key)

os.remove(u'本地座右铭.txt')


# 访问不存在的Object会抛出 osslite.exceptions.NoSuchKey
try:
    bucket.get_object('motto.txt')
except osslite.exceptions.NoSuchKey as e:
    print('status={0}, request_id={1}'.format(e.status, e.request_id))
