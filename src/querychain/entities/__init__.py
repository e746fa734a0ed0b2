"""
querychain entities.

- query_builder: fluent statement construction and terminal operations
- shared: pending-query state, SQL rendering, executor protocol, ODBC client
"""
