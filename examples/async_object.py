# -*- coding: utf-8 -*-

import asyncio
import os

import osslite


# 以下代码展示了异步接口的用法：并发上传一批Object，再并发下载、删除。


access_key_id = os.getenv('OSS_TEST_ACCESS_KEY_ID', '<你的AccessKeyId>')
access_key_secret = os.getenv('OSS_TEST_ACCESS_KEY_SECRET', '<你的AccessKeySecret>')
bucket_name = os.getenv('OSS_TEST_BUCKET', '<你的Bucket>')
endpoint = os.getenv('OSS_TEST_ENDPOINT', '<你的访问域名>')


for param in (access_key_id, access_key_secret, bucket_name, endpoint):
    assert '<' not in param, '请设置参数：' + param


async def main():
    keys = ['async-example/{0}.txt'.format(i) for i in range(10)]

    # AsyncBucket以async with的方式使用，退出时会关闭底层的连接池
    async with osslite.AsyncBucket(osslite.Auth(access_key_id, access_key_secret), endpoint, bucket_name) as bucket:
        await asyncio.gather(*[bucket.put_object(key, 'content of ' + key) for key in keys])

        results = await asyncio.gather(*[bucket.get_object(key) for key in keys])
        for key, result in zip(keys, results):
            print('{0}: {1}'.format(key, result.read()))

        listed = await bucket.list_objects(prefix='async-example/')
        print('listed {0} objects'.format(len(listed.object_list)))

        await asyncio.gather(*[bucket.delete_object(key) for key in keys])


asyncio.run(main())
