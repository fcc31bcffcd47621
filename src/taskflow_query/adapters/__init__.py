"""Reference QueryHandle implementations.

``taskflow_query.adapters.memory`` has no third-party dependencies;
``taskflow_query.adapters.sqlalchemy`` requires SQLAlchemy 2.x and is
not imported here.
"""
