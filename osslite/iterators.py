# -*- coding: utf-8 -*-

"""
osslite.iterators
~~~~~~~~~~~~~~~~~

This module contains some easy to use iterators for enumerating buckets and files.
Each page is fetched with a single request; errors are raised to the caller as is.
"""

from .models import SimplifiedObjectInfo


class _BaseIterator(object):
    def __init__(self, marker):
        self.is_truncated = True
        self.next_marker = marker

        self.entries = []

    def _fetch(self):
        raise NotImplementedError    # pragma: no cover

    def __iter__(self):
        return self

    def __next__(self):
        while True:
            if self.entries:
                return self.entries.pop(0)

            if not self.is_truncated:
                raise StopIteration

            self.is_truncated, self.next_marker = self._fetch()


class BucketIterator(_BaseIterator):
    """Iterator for bucket

    It returns a :class:`SimplifiedBucketInfo <osslite.models.SimplifiedBucketInfo>` instance in each iteration.

    :param service: :class:`Service <osslite.Service>` instance
    :param prefix: Bucket name prefix---only buckets with the prefix are listed.
    :param marker: Paging marker. Only lists bucket whose name is after the marker in the lexicographic order.
    :param max_keys: The max keys to return for list_buckets. Note that it does **not** mean the max keys for the iterator to return is no more than it. The iterator could return more items than max_keys.
    """
    def __init__(self, service, prefix='', marker='', max_keys=100):
        super(BucketIterator, self).__init__(marker)
        self.service = service
        self.prefix = prefix
        self.max_keys = max_keys

    def _fetch(self):
        result = self.service.list_buckets(prefix=self.prefix,
                                           marker=self.next_marker,
                                           max_keys=self.max_keys)
        self.entries = result.buckets

        return result.is_truncated, result.next_marker


class ObjectIterator(_BaseIterator):
    """Iterator for files in bucket.

    It returns a :class:`SimplifiedObjectInfo <osslite.models.SimplifiedObjectInfo>` instance for each iteration.
    When `SimplifiedObjectInfo.is_prefix()` is True, it means the objet is common prefix (directory, not a file); Otherwise it's a file.

    :param bucket: :class:`Bucket <osslite.Bucket>` instance
    :param prefix: The file name prefix
    :param delimiter: delimiter for the directory
    :param marker: Paging marker
    :param max_keys: The max keys to return for each `list_objects` call. However the total entries iterator returns could be more than that.
    """
    def __init__(self, bucket, prefix='', delimiter='', marker='', max_keys=100):
        super(ObjectIterator, self).__init__(marker)

        self.bucket = bucket
        self.prefix = prefix
        self.delimiter = delimiter
        self.max_keys = max_keys

    def _fetch(self):
        result = self.bucket.list_objects(prefix=self.prefix,
                                          delimiter=self.delimiter,
                                          marker=self.next_marker,
                                          max_keys=self.max_keys)
        self.entries = result.object_list + [SimplifiedObjectInfo(prefix, None, None, None, None, None)
                                             for prefix in result.prefix_list]
        self.entries.sort(key=lambda obj: obj.key)

        return result.is_truncated, result.next_marker
