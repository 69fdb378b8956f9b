# -*- coding: utf-8 -*-

"""
osslite.defaults
~~~~~~~~~~~~~~~~

Global Default variables.

"""


def get(value, default_value):
    if value is None:
        return default_value
    else:
        return value


#: connection timeout
connect_timeout = 60

#: Connection pool size for each session.
connection_pool_size = 10
